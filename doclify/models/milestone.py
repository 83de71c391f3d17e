from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class Milestone(SQLModel, table=True):
    __tablename__ = "milestones"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    title: str
    due_date: str                  # ISO yyyy-mm-dd
    type: str = ""
    status: str = "pending"        # 'pending', 'in_progress', 'completed'
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)
