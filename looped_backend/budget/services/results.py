# budget/services/results.py

"""
OPERATION RESULTS

Services raise typed LedgerError subclasses inside transaction.atomic so the
database rolls the whole unit back. Callers of the public operation API get
an OperationResult instead and branch on `ok` / `error.code`:

    result = operations.create_batch(user=..., ...)
    if not result.ok:
        if isinstance(result.error, InsufficientFundsError):
            ...  # ask the user to top up

Structural failures (DatabaseError) are logged with traceback and reported
as InternalConsistencyError; the raw storage message is never returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError, OperationalError

from budget.services.exceptions import (
    InternalConsistencyError,
    InvalidInputError,
    LedgerError,
    NotFoundOrUnauthorizedError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    value: Any = None
    error: LedgerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value) -> "OperationResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LedgerError) -> "OperationResult":
        return cls(error=error)

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value


def _validation_message(exc: ValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(
            f"{field}: {' '.join(msgs)}" for field, msgs in exc.message_dict.items()
        )
    return " ".join(exc.messages)


def run_operation(operation: str, fn: Callable[..., Any], /, **kwargs) -> OperationResult:
    """Invoke a service and fold its outcome into an OperationResult."""
    try:
        value = fn(**kwargs)
    except LedgerError as exc:
        logger.info(
            "Operation rejected",
            extra={"operation": operation, "code": exc.code, "detail": str(exc)},
        )
        return OperationResult.failure(exc)
    except ObjectDoesNotExist:
        return OperationResult.failure(NotFoundOrUnauthorizedError("Entity not found or unauthorized"))
    except ValidationError as exc:
        return OperationResult.failure(InvalidInputError(_validation_message(exc)))
    except OperationalError:
        # lock timeouts / dropped connections: the unit was rolled back, caller may retry
        logger.exception("Operation failed (retryable)", extra={"operation": operation})
        return OperationResult.failure(InternalConsistencyError(operation=operation, retryable=True))
    except DatabaseError:
        logger.exception("Operation failed", extra={"operation": operation})
        return OperationResult.failure(InternalConsistencyError(operation=operation))

    return OperationResult.success(value)
