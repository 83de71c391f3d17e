from typing import List

from doclify.schemas.draft import ProjectDraft
from doclify.validations.rules import Violation, is_blank, is_valid_email

TITLE_MIN = 3


def validate_draft(draft: ProjectDraft) -> List[Violation]:
    """Re-checks the whole draft right before it is committed.

    Unlike the step schemas this never stops at the first problem: every
    root field and every element of the nested collections is inspected and
    all violations are returned together (empty list means committable).
    Collections that were skipped or never filled are not checked.
    """
    violations: List[Violation] = []

    def add(path: str, message: str):
        violations.append(Violation(path=path, message=message))

    if is_blank(draft.title):
        add("title", "Título do projeto é obrigatório")
    elif len(draft.title.strip()) < TITLE_MIN:
        add("title", "Título deve ter pelo menos 3 caracteres")

    if is_blank(draft.description):
        add("description", "Descrição do projeto é obrigatória")

    for i, member in enumerate(draft.items("members")):
        n = i + 1
        if is_blank(member.name):
            add(f"members.{i}.name", f"Nome do membro {n} é obrigatório")
        if is_blank(member.role):
            add(f"members.{i}.role", f"Função do membro {n} é obrigatória")
        if not is_blank(member.email) and not is_valid_email(member.email):
            add(f"members.{i}.email", f"Email do membro {n} é inválido")

    for i, req in enumerate(draft.items("functional_requirements")):
        n = i + 1
        if is_blank(req.title):
            add(f"functional_requirements.{i}.title", f"Título do requisito funcional {n} é obrigatório")
        if is_blank(req.description):
            add(f"functional_requirements.{i}.description", f"Descrição do requisito funcional {n} é obrigatória")

    for i, req in enumerate(draft.items("non_functional_requirements")):
        n = i + 1
        if is_blank(req.title):
            add(f"non_functional_requirements.{i}.title", f"Título do requisito não funcional {n} é obrigatório")
        if is_blank(req.description):
            add(f"non_functional_requirements.{i}.description", f"Descrição do requisito não funcional {n} é obrigatória")
        if is_blank(req.category):
            add(f"non_functional_requirements.{i}.category", f"Categoria do requisito não funcional {n} é obrigatória")

    return violations
