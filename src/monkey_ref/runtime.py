from __future__ import annotations

import importlib
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional

from .types import (
    Environment, MkArray, MkBoolean, MkBuiltin, MkError, MkFn, MkHash, MkInteger, MkNull, MkString,
    MkValue, NULL, ReturnSignal,
)

# Filled by @register_builtin while the stdlib module is imported; frozen
# into _BUILTIN_TABLE on first use and never touched again.
_REGISTRY: Dict[str, MkBuiltin] = {}
_BUILTIN_TABLE: Optional[Mapping[str, MkBuiltin]] = None

def register_builtin(name: str, *, arity: Optional[int] = None):
    def dec(fn: Callable[[List[MkValue]], MkValue]):
        if _BUILTIN_TABLE is not None:
            raise RuntimeError(f"builtin table already frozen; cannot register {name!r}")
        _REGISTRY[name] = MkBuiltin(name=name, fn=fn, arity=arity)
        return fn

    return dec

def builtin_table() -> Mapping[str, MkBuiltin]:
    """Load the stdlib (idempotent) and return the read-only builtin table."""
    global _BUILTIN_TABLE

    if _BUILTIN_TABLE is None:
        importlib.import_module("monkey_ref.stdlib")
        _BUILTIN_TABLE = MappingProxyType(dict(_REGISTRY))

    return _BUILTIN_TABLE

def new_error(fmt: str, *args: object) -> MkError:
    return MkError(fmt % args if args else fmt)

def is_error(value: Optional[MkValue]) -> bool:
    return isinstance(value, MkError)

def call_builtin(builtin: MkBuiltin, args: List[MkValue]) -> MkValue:
    if builtin.arity is not None and len(args) != builtin.arity:
        return new_error("wrong number of arguments. got=%d, want=%d", len(args), builtin.arity)

    return builtin.fn(args)

def call_mkfn(fn: MkFn, args: List[MkValue]) -> MkValue:
    """
    Call semantics:
    - new scope enclosed by the function's captured environment
    - parameters bound positionally; extra args ignored, missing ones left unbound
    - a `return` inside the body stops at this boundary
    """
    from .evaluator import eval_node  # local import to avoid cycle

    callee_env = fn.env.new_enclosed()

    for param, value in zip(fn.parameters, args):
        callee_env.set(param.value, value)

    try:
        return eval_node(fn.body, callee_env)
    except ReturnSignal as signal:
        return signal.value

def apply_function(callee: MkValue, args: List[MkValue]) -> MkValue:
    match callee:
        case MkFn():
            return call_mkfn(callee, args)
        case MkBuiltin():
            return call_builtin(callee, args)
        case _:
            return new_error("not a function: %s", callee.type_name())

HASHABLE_TYPES = (MkInteger, MkBoolean, MkString)

def unusable_key_error(key: MkValue) -> MkError:
    return new_error("unusable as hash key: %s", key.type_name())

