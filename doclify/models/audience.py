from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class Audience(SQLModel, table=True):
    __tablename__ = "audiences"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    name: str
    description: str = ""
    priority: str = "primary"      # 'primary', 'secondary'
    created_at: datetime = Field(default_factory=utcnow)
