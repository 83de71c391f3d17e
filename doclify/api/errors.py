from typing import Iterable

from fastapi import HTTPException


def validation_exception(violations: Iterable, message: str = "Erros de validação") -> HTTPException:
    errors = [{"path": v.path, "message": v.message} for v in violations]
    return HTTPException(status_code=422, detail={"message": message, "errors": errors})


def partial_failure_exception(outcome) -> HTTPException:
    failed = ", ".join(outcome.failed)
    return HTTPException(
        status_code=502,
        detail={
            "message": f"Projeto criado, mas falhou ao salvar: {failed}. Tente novamente.",
            "project_id": outcome.project_id,
            "attempt_id": outcome.attempt_id,
            "failed_resources": outcome.failed,
            "errors": outcome.errors,
        },
    )


def ledger_failure_exception(exc) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={"message": str(exc), "project_id": exc.project_id},
    )
