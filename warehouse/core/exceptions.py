from fastapi import HTTPException
from warehouse.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


# =====================================================
# LEDGER ERRORS
# =====================================================
class LedgerValidationError(AppException):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(400, message, ErrorCode.VALIDATION_ERROR, details)


class NotFoundError(AppException):
    def __init__(self, entity: str, ref=None):
        message = f"{entity} not found"
        super().__init__(
            404,
            message,
            ErrorCode.NOT_FOUND,
            {"entity": entity.lower().replace(" ", "_"), "ref": ref},
        )


class InsufficientStockError(AppException):
    def __init__(self, *, item_id: int, location_id: int, requested: int, available: int | None):
        super().__init__(
            400,
            "Insufficient stock",
            ErrorCode.INSUFFICIENT_STOCK,
            {
                "item_id": item_id,
                "location_id": location_id,
                "requested": requested,
                "available": available or 0,
            },
        )


class AlreadyReturnedError(AppException):
    def __init__(self, record_id: int):
        super().__init__(
            409,
            "Borrow record already returned",
            ErrorCode.ALREADY_RETURNED,
            {"record_id": record_id},
        )


class StoreFailureError(AppException):
    """Commit-level failure. The unit was rolled back; the message stays generic."""

    def __init__(self, operation: str):
        super().__init__(
            500,
            "Something went wrong while saving. Please try again.",
            ErrorCode.STORE_FAILURE,
            {"operation": operation},
        )
