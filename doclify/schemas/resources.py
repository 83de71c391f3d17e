from pydantic import BaseModel
from typing import Optional
from datetime import datetime

# Lectura de las colecciones hijas de un proyecto

class ChildRead(BaseModel):
    id: int
    project_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class TeamMemberRead(ChildRead):
    name: str
    role: str
    email: str = ""

class TechnologyRead(ChildRead):
    name: str
    category: str
    version: str = ""
    description: str = ""

class ObjectiveRead(ChildRead):
    title: str
    description: str = ""
    priority: str
    type: Optional[str] = None
    status: str

class FunctionalRequirementRead(ChildRead):
    title: str
    description: str
    priority: str
    status: str
    acceptance_criteria: str = ""

class NonFunctionalRequirementRead(ChildRead):
    title: str
    description: str
    category: str
    metric: str = ""
    target_value: str = ""

class MilestoneRead(ChildRead):
    title: str
    due_date: str
    type: str = ""
    status: str
    description: str = ""

class AudienceRead(ChildRead):
    name: str
    description: str = ""
    priority: str

class StakeholderRead(ChildRead):
    name: str
    role: str
    email: str
    phone: str = ""
    company: str = ""
    signature_required: bool = False
    signed_at: Optional[datetime] = None

class PaymentRead(BaseModel):
    id: int
    project_id: int
    total_amount: float
    currency: str
    payment_terms: str = ""
    milestones: str = ""

    class Config:
        from_attributes = True


READ_SCHEMAS = {
    "team": TeamMemberRead,
    "technologies": TechnologyRead,
    "objectives": ObjectiveRead,
    "functional_requirements": FunctionalRequirementRead,
    "non_functional_requirements": NonFunctionalRequirementRead,
    "milestones": MilestoneRead,
    "audiences": AudienceRead,
    "stakeholders": StakeholderRead,
}
