from enum import Enum


class ActivityCode(str, Enum):
    # auth
    LOGIN = "LOGIN"

    # users
    CREATE_USER = "CREATE_USER"

    # catalog
    CREATE_ITEM = "CREATE_ITEM"
    UPDATE_ITEM = "UPDATE_ITEM"
    CREATE_LOCATION = "CREATE_LOCATION"
    CREATE_CATEGORY = "CREATE_CATEGORY"

    # ledger
    STOCK_IN = "STOCK_IN"
    STOCK_OUT = "STOCK_OUT"
    BORROW_ITEM = "BORROW_ITEM"
    RETURN_ITEM = "RETURN_ITEM"
