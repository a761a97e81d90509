from __future__ import annotations

from ..runtime import MkBoolean, MkInteger, MkNull, MkString, MkValue

INT64_MIN = -(2**63)
INT64_SPAN = 2**64

def is_truthy(val: MkValue) -> bool:
    match val:
        case MkBoolean(value=b):
            return b
        case MkNull():
            return False
        case _:
            return True

def values_equal(lhs: MkValue, rhs: MkValue) -> bool:
    """Scalars compare by value; arrays, hashes and functions by identity."""
    match (lhs, rhs):
        case (MkInteger(value=a), MkInteger(value=b)):
            return a == b
        case (MkString(value=a), MkString(value=b)):
            return a == b
        case (MkBoolean(value=a), MkBoolean(value=b)):
            return a == b
        case (MkNull(), MkNull()):
            return True
        case _:
            return lhs is rhs

def wrap_int64(value: int) -> int:
    """Two's-complement wraparound into the signed 64-bit range."""
    return (value - INT64_MIN) % INT64_SPAN + INT64_MIN
