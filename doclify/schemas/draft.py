from pydantic import BaseModel, ConfigDict
from typing import List, Optional

# Tipos del borrador: laxos a propósito, el store no valida.
# None en una colección = paso no visitado; [] = visitado y vacío.

class DraftItem(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DraftMember(DraftItem):
    name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None


class DraftTechnology(DraftItem):
    name: Optional[str] = None
    category: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None


class DraftObjective(DraftItem):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    type: Optional[str] = None


class DraftFunctionalRequirement(DraftItem):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    acceptance_criteria: Optional[str] = None


class DraftNonFunctionalRequirement(DraftItem):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    metric: Optional[str] = None
    target_value: Optional[str] = None


class DraftMilestone(DraftItem):
    title: Optional[str] = None
    due_date: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


class ProjectDraft(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    company_name: Optional[str] = None
    project_type: Optional[str] = None
    status: str = "draft"
    architecture: Optional[str] = None
    success_criteria: Optional[str] = None
    constraints: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    methodology: Optional[str] = None
    version: Optional[str] = None
    notes: Optional[str] = None

    members: Optional[List[DraftMember]] = None
    technologies: Optional[List[DraftTechnology]] = None
    objectives: Optional[List[DraftObjective]] = None
    functional_requirements: Optional[List[DraftFunctionalRequirement]] = None
    non_functional_requirements: Optional[List[DraftNonFunctionalRequirement]] = None
    milestones: Optional[List[DraftMilestone]] = None

    def is_present(self, collection: str) -> bool:
        return getattr(self, collection) is not None

    def items(self, collection: str) -> list:
        return getattr(self, collection) or []
