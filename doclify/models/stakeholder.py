from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class Stakeholder(SQLModel, table=True):
    __tablename__ = "stakeholders"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    name: str
    role: str
    email: str
    phone: str = ""
    company: str = ""
    signature_required: bool = False
    signed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
