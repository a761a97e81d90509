from __future__ import annotations

from typing import Callable, List, Union

from ..runtime import Environment, MkError, MkFn, MkValue, apply_function, is_error
from ..tree import CallExpression, Expression, FunctionLiteral, Node

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_fn_literal(n: FunctionLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    return MkFn(parameters=n.parameters, body=n.body, env=env)

def eval_call(n: CallExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    callee = eval_func(n.function, env)
    if is_error(callee):
        return callee

    args = eval_expressions(n.arguments, env, eval_func)
    if isinstance(args, MkError):
        return args

    return apply_function(callee, args)

def eval_expressions(exprs: tuple[Expression, ...], env: Environment, eval_func: EvalFunc) -> Union[List[MkValue], MkError]:
    """Evaluate left to right; the first error replaces the whole list."""
    values: List[MkValue] = []

    for expr in exprs:
        value = eval_func(expr, env)
        if is_error(value):
            return value
        values.append(value)

    return values
