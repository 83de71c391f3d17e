from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class Objective(SQLModel, table=True):
    __tablename__ = "objectives"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    title: str
    description: str = ""
    priority: str = "medium"       # 'high', 'medium', 'low'
    type: Optional[str] = None     # 'business', 'technical', 'user', 'performance', 'security', 'other'
    status: str = "pending"
    created_at: datetime = Field(default_factory=utcnow)
