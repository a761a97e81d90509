"""Built-in functions (len, puts, ...) registered via monkey_ref.runtime."""

from __future__ import annotations

from typing import List

from .runtime import register_builtin, new_error, MkArray, MkInteger, MkString, MkValue, NULL

def _require_array(name: str, value: MkValue):
    if isinstance(value, MkArray):
        return None
    return new_error("argument to `%s` must be ARRAY, got %s", name, value.type_name())

@register_builtin("len", arity=1)
def std_len(args: List[MkValue]) -> MkValue:
    match args[0]:
        case MkString(value=s):
            return MkInteger(len(s.encode("utf-8")))
        case MkArray(elements=elements):
            return MkInteger(len(elements))
        case other:
            return new_error("argument to `len` not supported, got %s", other.type_name())

@register_builtin("first", arity=1)
def std_first(args: List[MkValue]) -> MkValue:
    err = _require_array("first", args[0])
    if err is not None:
        return err

    elements = args[0].elements
    return elements[0] if elements else NULL

@register_builtin("last", arity=1)
def std_last(args: List[MkValue]) -> MkValue:
    err = _require_array("last", args[0])
    if err is not None:
        return err

    elements = args[0].elements
    return elements[-1] if elements else NULL

@register_builtin("rest", arity=1)
def std_rest(args: List[MkValue]) -> MkValue:
    err = _require_array("rest", args[0])
    if err is not None:
        return err

    elements = args[0].elements
    if not elements:
        return NULL
    return MkArray(elements[1:])

@register_builtin("push", arity=2)
def std_push(args: List[MkValue]) -> MkValue:
    err = _require_array("push", args[0])
    if err is not None:
        return err

    # New tuple; the caller's array keeps its elements
    return MkArray(args[0].elements + (args[1],))

@register_builtin("puts")
def std_puts(args: List[MkValue]) -> MkValue:
    print(*[arg.inspect() for arg in args])
    return MkInteger(len(args))
