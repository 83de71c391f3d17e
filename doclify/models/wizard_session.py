from typing import Optional, Dict, Any, List
from sqlmodel import SQLModel, Field, Column
from datetime import datetime
from doclify.utils.dates import utcnow
from sqlalchemy import JSON
from uuid import uuid4

def new_commit_key() -> str:
    return uuid4().hex

class WizardSession(SQLModel, table=True):
    __tablename__ = "wizard_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    step_index: int = 0
    status: str = "editing"        # 'editing', 'submitting', 'finished'
    draft: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    validated_steps: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    # clave de idempotencia del commit; cambia al resetear el borrador
    commit_key: str = Field(default_factory=new_commit_key, index=True)
    project_id: Optional[int] = None   # se rellena cuando el commit termina
    created_at: datetime = Field(default_factory=utcnow)
    last_updated: datetime = Field(default_factory=utcnow)
