from typing import Any, Dict, Optional

from doclify.schemas.draft import ProjectDraft


class WizardStore:
    """Holds one wizard session's draft and step index.

    One instance per session, passed explicitly to whoever needs it. It does
    no validation: patches are merged shallowly and list fields replace the
    previous list as a whole.
    """

    def __init__(self, draft: Optional[ProjectDraft] = None, step_index: int = 0):
        self._draft = draft
        self._step_index = step_index

    def get_draft(self) -> Optional[ProjectDraft]:
        return self._draft

    def set_draft(self, patch: Dict[str, Any]) -> None:
        current = self._draft.model_dump() if self._draft is not None else {}
        current.update(patch or {})
        self._draft = ProjectDraft.model_validate(current)

    def reset_draft(self) -> None:
        self._draft = None
        self._step_index = 0

    def get_step_index(self) -> int:
        return self._step_index

    def set_step_index(self, index: int) -> None:
        self._step_index = index

    def snapshot(self) -> Dict[str, Any]:
        return {
            "draft": self._draft.model_dump() if self._draft is not None else None,
            "step_index": self._step_index,
        }

    @classmethod
    def from_snapshot(cls, draft: Optional[Dict[str, Any]], step_index: int = 0) -> "WizardStore":
        return cls(
            draft=ProjectDraft.model_validate(draft) if draft is not None else None,
            step_index=step_index,
        )
