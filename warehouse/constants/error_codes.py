from enum import Enum


class ErrorCode(str, Enum):
    # generic
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # ledger
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    ALREADY_RETURNED = "ALREADY_RETURNED"
    STORE_FAILURE = "STORE_FAILURE"

    # catalog
    ITEM_CODE_EXISTS = "ITEM_CODE_EXISTS"
    LOCATION_CODE_EXISTS = "LOCATION_CODE_EXISTS"
    CATEGORY_EXISTS = "CATEGORY_EXISTS"
    USERNAME_EXISTS = "USERNAME_EXISTS"
    NO_CHANGES_DETECTED = "NO_CHANGES_DETECTED"
