from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from doclify.schemas.resources import (
    AudienceRead,
    FunctionalRequirementRead,
    MilestoneRead,
    NonFunctionalRequirementRead,
    ObjectiveRead,
    PaymentRead,
    StakeholderRead,
    TeamMemberRead,
    TechnologyRead,
)

class ProjectCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = ""
    company_name: Optional[str] = ""
    project_type: Optional[str] = ""
    status: Optional[str] = "draft"
    architecture: Optional[str] = None
    success_criteria: Optional[str] = None
    constraints: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    methodology: Optional[str] = None

class ProjectRead(BaseModel):
    id: int
    user_id: str
    title: str
    description: str
    company_name: str
    project_type: str
    status: str
    architecture: Optional[str] = None
    success_criteria: Optional[str] = None
    constraints: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    methodology: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    company_name: Optional[str] = None
    project_type: Optional[str] = None
    status: Optional[str] = None
    architecture: Optional[str] = None
    success_criteria: Optional[str] = None
    constraints: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    methodology: Optional[str] = None

class ProjectFull(BaseModel):
    project: ProjectRead
    team: List[TeamMemberRead] = []
    technologies: List[TechnologyRead] = []
    objectives: List[ObjectiveRead] = []
    functional_requirements: List[FunctionalRequirementRead] = []
    non_functional_requirements: List[NonFunctionalRequirementRead] = []
    milestones: List[MilestoneRead] = []
    audiences: List[AudienceRead] = []
    stakeholders: List[StakeholderRead] = []
    payment: Optional[PaymentRead] = None

    class Config:
        from_attributes = True
