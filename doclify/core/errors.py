from typing import Optional


class DoclifyError(Exception):
    """Base class for errors raised by the wizard and commit services."""


class DraftValidationError(DoclifyError):
    """Pre-flight validation failed; carries every violation found."""

    def __init__(self, violations: list):
        self.violations = list(violations)
        joined = ", ".join(v.message for v in self.violations)
        super().__init__(f"Erros de validação: {joined}")


class RootCreationError(DoclifyError):
    """The project row could not be created, so no child was attempted."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class WizardStateError(DoclifyError):
    """A navigation or submit request is not allowed in the current state."""


class CommitNotFoundError(DoclifyError):
    pass


class CommitLedgerError(DoclifyError):
    """The commit attempt could not be recorded.

    ``project_id`` is set when the root project already exists.
    """

    def __init__(self, message: str, project_id: Optional[int] = None):
        self.project_id = project_id
        super().__init__(message)
