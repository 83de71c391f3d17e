from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from doclify.utils.dates import utcnow

class PaymentInfo(SQLModel, table=True):
    """Una fila por proyecto (upsert)."""
    __tablename__ = "payment"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, unique=True)
    total_amount: float = 0
    currency: str = "BRL"
    payment_terms: str = ""
    milestones: str = ""
    created_at: datetime = Field(default_factory=utcnow)
