from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)   # id opaco del proveedor de identidad
    title: str
    description: str = ""
    company_name: str = ""
    project_type: str = ""
    status: str = "draft"              # 'draft', 'in_progress', 'review', 'completed'
    architecture: Optional[str] = None
    success_criteria: Optional[str] = None
    constraints: Optional[str] = None
    start_date: Optional[str] = None   # ISO yyyy-mm-dd
    end_date: Optional[str] = None
    methodology: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
