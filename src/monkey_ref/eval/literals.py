from __future__ import annotations

from typing import Callable, Dict

from ..runtime import (
    HASHABLE_TYPES,
    Environment,
    MkArray,
    MkError,
    MkHash,
    MkInteger,
    MkValue,
    NULL,
    is_error,
    new_error,
    unusable_key_error,
)
from ..tree import ArrayLiteral, HashLiteral, IndexExpression, Node
from ..types import HashKey, HashPair, new_hash
from .fn import eval_expressions

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_array(n: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    elements = eval_expressions(n.elements, env, eval_func)
    if isinstance(elements, MkError):
        return elements

    return MkArray(tuple(elements))

def eval_hash(n: HashLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    pairs: Dict[HashKey, HashPair] = {}

    for key_node, value_node in n.pairs:
        key = eval_func(key_node, env)
        if is_error(key):
            return key
        if not isinstance(key, HASHABLE_TYPES):
            return unusable_key_error(key)

        value = eval_func(value_node, env)
        if is_error(value):
            return value

        # later duplicates overwrite earlier ones
        pairs[key.hash_key()] = HashPair(key, value)

    return new_hash(pairs)

def eval_index(n: IndexExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    left = eval_func(n.left, env)
    if is_error(left):
        return left

    index = eval_func(n.index, env)
    if is_error(index):
        return index

    return index_value(left, index)

def index_value(left: MkValue, index: MkValue) -> MkValue:
    match left:
        case MkArray(elements=elements) if isinstance(index, MkInteger):
            i = index.value
            if i < 0 or i >= len(elements):
                return NULL
            return elements[i]
        case MkHash(pairs=pairs):
            if not isinstance(index, HASHABLE_TYPES):
                return unusable_key_error(index)
            pair = pairs.get(index.hash_key())
            return pair.value if pair is not None else NULL

    return new_error("index operator not supported: %s", left.type_name())
