# warehouse/constants/flow_type.py

from enum import Enum


class FlowType(str, Enum):
    IN = "in"
    OUT = "out"
    TRANSFER = "transfer"
    BORROW = "borrow"
    RETURN = "return"
