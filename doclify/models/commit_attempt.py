from typing import Optional, Dict, Any, List
from sqlmodel import SQLModel, Field, Column
from datetime import datetime
from doclify.utils.dates import utcnow
from sqlalchemy import JSON, UniqueConstraint

class CommitAttempt(SQLModel, table=True):
    """Ledger de un commit: qué recursos hijos quedan pendientes y con qué filas."""
    __tablename__ = "commit_attempts"
    # la clave de idempotencia es única por usuario
    __table_args__ = (UniqueConstraint("user_id", "idempotency_key", name="uq_commit_attempts_user_key"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    idempotency_key: Optional[str] = Field(default=None, index=True)
    project_id: Optional[int] = None
    status: str = "started"        # 'started', 'root_failed', 'partial_failure', 'completed'
    pending: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    succeeded: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    errors: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
