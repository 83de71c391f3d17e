from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from doclify.validations.rules import Violation

class StepInfo(BaseModel):
    id: str
    title: str
    description: str
    status: str          # 'completed', 'current', 'pending'
    disabled: bool

class CommitRead(BaseModel):
    attempt_id: Optional[int] = None
    project_id: Optional[int] = None
    status: str
    succeeded: List[str] = []
    failed: List[str] = []
    errors: Dict[str, str] = {}
    redirect_to: Optional[str] = None

class WizardRead(BaseModel):
    id: int
    status: str
    step_index: int
    step_id: str
    step_count: int
    progress: float
    validated_steps: List[int] = []
    form_data: Dict[str, Any] = {}
    draft: Optional[Dict[str, Any]] = None
    steps: List[StepInfo] = []
    project_id: Optional[int] = None
    redirect_to: Optional[str] = None

class StepResponse(BaseModel):
    ok: bool
    violations: List[Violation] = []
    wizard: WizardRead
    commit: Optional[CommitRead] = None

class JumpRequest(BaseModel):
    step_index: int
