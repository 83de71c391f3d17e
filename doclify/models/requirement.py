from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class FunctionalRequirement(SQLModel, table=True):
    __tablename__ = "requirements_functional"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    title: str
    description: str
    priority: str = "must_have"    # 'must_have', 'should_have', 'could_have', 'wont_have'
    status: str = "pending"        # 'pending', 'in_progress', 'completed'
    acceptance_criteria: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class NonFunctionalRequirement(SQLModel, table=True):
    __tablename__ = "requirements_non_functional"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    title: str
    description: str
    category: str = "other"        # 'performance', 'security', 'usability', 'reliability', 'scalability', 'other'
    metric: str = ""
    target_value: str = ""
    created_at: datetime = Field(default_factory=utcnow)
