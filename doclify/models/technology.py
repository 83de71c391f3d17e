from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class Technology(SQLModel, table=True):
    __tablename__ = "technologies"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    name: str
    category: str = "other"        # 'frontend', 'backend', 'database', 'mobile', 'devops', 'other'
    version: str = ""
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)
