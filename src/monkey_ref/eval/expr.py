from __future__ import annotations

from typing import Callable

from ..runtime import Environment, MkInteger, MkString, MkValue, is_error, new_error
from ..tree import InfixExpression, Node, PrefixExpression
from ..types import native_bool
from .helpers import is_truthy, values_equal, wrap_int64

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_prefix(n: PrefixExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    right = eval_func(n.right, env)
    if is_error(right):
        return right

    match n.operator:
        case '!':
            return native_bool(not is_truthy(right))
        case '-':
            if not isinstance(right, MkInteger):
                return new_error("unknown operator: -%s", right.type_name())
            return MkInteger(wrap_int64(-right.value))

    return new_error("unknown operator: %s%s", n.operator, right.type_name())

def eval_infix(n: InfixExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    # Left first; an error on either side wins before the operator is looked at
    left = eval_func(n.left, env)
    if is_error(left):
        return left

    right = eval_func(n.right, env)
    if is_error(right):
        return right

    return apply_infix(n.operator, left, right)

def apply_infix(op: str, left: MkValue, right: MkValue) -> MkValue:
    if isinstance(left, MkInteger) and isinstance(right, MkInteger):
        return _integer_infix(op, left.value, right.value)

    if isinstance(left, MkString) and isinstance(right, MkString):
        return _string_infix(op, left, right)

    if type(left) is not type(right):
        return new_error("type mismatch: %s %s %s", left.type_name(), op, right.type_name())

    match op:
        case '==':
            return native_bool(values_equal(left, right))
        case '!=':
            return native_bool(not values_equal(left, right))

    return new_error("unknown operator: %s %s %s", left.type_name(), op, right.type_name())

def _integer_infix(op: str, a: int, b: int) -> MkValue:
    match op:
        case '+':
            return MkInteger(wrap_int64(a + b))
        case '-':
            return MkInteger(wrap_int64(a - b))
        case '*':
            return MkInteger(wrap_int64(a * b))
        case '/':
            if b == 0:
                return new_error("division by zero")
            return MkInteger(wrap_int64(_trunc_div(a, b)))
        case '%':
            if b == 0:
                return new_error("division by zero")
            return MkInteger(a - b * _trunc_div(a, b))
        case '<':
            return native_bool(a < b)
        case '>':
            return native_bool(a > b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)

    return new_error("unknown operator: INTEGER %s INTEGER", op)

def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q

def _string_infix(op: str, left: MkString, right: MkString) -> MkValue:
    match op:
        case '+':
            return MkString(left.value + right.value)
        case '==':
            return native_bool(left.value == right.value)
        case '!=':
            return native_bool(left.value != right.value)

    return new_error("unknown operator: STRING %s STRING", op)
