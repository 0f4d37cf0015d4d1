# budget/api/errors.py

from rest_framework import status
from rest_framework.response import Response

from budget.services.exceptions import InternalConsistencyError, LedgerError

# ======================================================
# API ERROR NORMALIZATION
# ======================================================

STATUS_BY_CODE = {
    "INSUFFICIENT_FUNDS": status.HTTP_402_PAYMENT_REQUIRED,
    "INSUFFICIENT_FUNDS_FOR_REVERSAL": status.HTTP_402_PAYMENT_REQUIRED,
    "INVALID_AMOUNT": status.HTTP_400_BAD_REQUEST,
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "ALREADY_SOLD": status.HTTP_409_CONFLICT,
    "ALREADY_UNSOLD": status.HTTP_409_CONFLICT,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INTERNAL_CONSISTENCY": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(*, code: str, message: str, http_status: int, details: dict | None = None):
    """
    Canonical API error response.
    """
    body = {"code": code, "message": message}
    if details:
        body.update(details)
    return Response({"error": body}, status=http_status)


def ledger_error_response(error: LedgerError):
    http_status = STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)

    if isinstance(error, InternalConsistencyError) and error.retryable:
        http_status = status.HTTP_503_SERVICE_UNAVAILABLE

    return error_response(
        code=error.code,
        message=str(error),
        http_status=http_status,
        details=error.details(),
    )
