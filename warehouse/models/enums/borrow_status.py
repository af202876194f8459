import enum


class BorrowKind(str, enum.Enum):
    borrow = "borrow"
    return_ = "return"


class BorrowStatus(str, enum.Enum):
    borrowed = "borrowed"
    returned = "returned"
    # declared for the schema; nothing moves records here yet
    overdue = "overdue"
