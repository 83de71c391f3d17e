import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from doclify.core.errors import CommitLedgerError, CommitNotFoundError
from doclify.models.commit_attempt import CommitAttempt
from doclify.utils.dates import utcnow

logger = logging.getLogger(__name__)

LEDGER_ERROR_MESSAGE = "Não foi possível registrar o envio do projeto. Tente novamente."


class CommitLedger:
    """Durable record of each commit attempt.

    After the root project exists the ledger keeps, per child resource that
    has not been stored yet, the exact rows to insert. A retry replays only
    those resources against the same project, and an idempotency key maps a
    repeated submit back to its attempt instead of creating a second project.
    Keys are scoped by owner. Database failures surface as
    ``CommitLedgerError``.
    """

    def __init__(self, engine, owner_id: str):
        self.engine = engine
        self.owner_id = owner_id

    @contextmanager
    def _session(self):
        with Session(self.engine) as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Commit ledger unavailable: %s", exc)
                raise CommitLedgerError(LEDGER_ERROR_MESSAGE) from exc

    def _save(self, session: Session, attempt: CommitAttempt) -> CommitAttempt:
        attempt.updated_at = utcnow()
        session.add(attempt)
        session.commit()
        session.refresh(attempt)
        return attempt

    def get(self, attempt_id: int) -> CommitAttempt:
        with self._session() as session:
            attempt = session.get(CommitAttempt, attempt_id)
            if not attempt or attempt.user_id != self.owner_id:
                raise CommitNotFoundError(f"Commit attempt {attempt_id} not found")
            return attempt

    def find(self, idempotency_key: Optional[str]) -> Optional[CommitAttempt]:
        if not idempotency_key:
            return None
        with self._session() as session:
            return session.exec(
                select(CommitAttempt)
                .where(CommitAttempt.idempotency_key == idempotency_key)
                .where(CommitAttempt.user_id == self.owner_id)
            ).first()

    def start(self, idempotency_key: Optional[str] = None) -> CommitAttempt:
        existing = self.find(idempotency_key)
        if existing is not None:
            return existing
        with self._session() as session:
            attempt = self._save(session, CommitAttempt(user_id=self.owner_id, idempotency_key=idempotency_key))
            logger.info("Commit attempt %s started", attempt.id)
            return attempt

    def root_failed(self, attempt_id: int, error: str) -> CommitAttempt:
        with self._session() as session:
            attempt = session.get(CommitAttempt, attempt_id)
            attempt.status = "root_failed"
            attempt.errors = {"project": error}
            return self._save(session, attempt)

    def root_created(self, attempt_id: int, project_id: int, pending: Dict[str, List[Dict[str, Any]]]) -> CommitAttempt:
        with self._session() as session:
            attempt = session.get(CommitAttempt, attempt_id)
            attempt.project_id = project_id
            attempt.pending = dict(pending)
            attempt.succeeded = ["project"]
            attempt.errors = {}
            return self._save(session, attempt)

    def settle(self, attempt_id: int, succeeded: List[str], errors: Dict[str, str]) -> CommitAttempt:
        """Drops succeeded resources from the pending set and records failures."""
        with self._session() as session:
            attempt = session.get(CommitAttempt, attempt_id)
            pending = {k: v for k, v in (attempt.pending or {}).items() if k not in succeeded}
            done = list(attempt.succeeded or [])
            done.extend(r for r in succeeded if r not in done)
            attempt.pending = pending
            attempt.succeeded = done
            attempt.errors = dict(errors)
            attempt.status = "partial_failure" if pending else "completed"
            attempt = self._save(session, attempt)
            if pending:
                logger.warning(
                    "Commit attempt %s left project %s incomplete; pending: %s",
                    attempt.id, attempt.project_id, ", ".join(pending),
                )
            return attempt
