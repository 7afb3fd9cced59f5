# =========================================================
# POS ERROR TAXONOMY
#
# Services raise these; main.py maps them to HTTP responses.
# Pure domain functions never raise them, they return
# result objects instead.
# =========================================================

from fastapi import status


class POSError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(POSError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(POSError):
    status_code = status.HTTP_404_NOT_FOUND


class BusinessRuleError(POSError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(POSError):
    """Unique-constraint style clash; the caller may regenerate and retry."""

    status_code = status.HTTP_409_CONFLICT


class PersistenceError(POSError):
    """A database unit of work failed and was rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
