from __future__ import annotations

from typing import Callable, Iterable

from ..runtime import Environment, MkInteger, MkValue, NULL, ReturnSignal, is_error, new_error
from ..tree import (
    BlockStatement,
    DoublePlusStatement,
    ForExpression,
    IfExpression,
    LetStatement,
    Node,
    Program,
    ReturnStatement,
    Statement,
    SwitchStatement,
)
from .helpers import is_truthy, values_equal, wrap_int64

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_program(n: Program, env: Environment, eval_func: EvalFunc) -> MkValue:
    try:
        return eval_statements(n.statements, env, eval_func)
    except ReturnSignal as signal:
        return signal.value

def eval_block(n: BlockStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    return eval_statements(n.statements, env, eval_func)

def eval_statements(statements: Iterable[Statement], env: Environment, eval_func: EvalFunc) -> MkValue:
    """Run statements in order; the last value wins, an error stops the run."""
    result: MkValue = NULL

    for stmt in statements:
        result = eval_func(stmt, env)
        if is_error(result):
            return result

    return result

def eval_let(n: LetStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    value = eval_func(n.value, env) if n.value is not None else NULL
    if is_error(value):
        return value

    env.set(n.name.value, value)
    return NULL

def eval_return(n: ReturnStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    value = eval_func(n.value, env) if n.value is not None else NULL
    if is_error(value):
        return value

    raise ReturnSignal(value)

def eval_double_plus(n: DoublePlusStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    name = n.name.value
    current = env.get(name)

    if current is None:
        return new_error("identifier not found: %s", name)
    if not isinstance(current, MkInteger):
        return new_error("unknown operator: %s++", current.type_name())

    bumped = MkInteger(wrap_int64(current.value + 1))
    env.assign(name, bumped)
    return bumped

def eval_if(n: IfExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    cond = eval_func(n.condition, env)
    if is_error(cond):
        return cond

    if is_truthy(cond):
        return eval_func(n.consequence, env)
    if n.alternative is not None:
        return eval_func(n.alternative, env)
    return NULL

def eval_for(n: ForExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    # init binding and anything the body declares stay local to the loop
    loop_env = env.new_enclosed()

    if n.init is not None:
        init = eval_func(n.init, loop_env)
        if is_error(init):
            return init

    while True:
        if n.condition is not None:
            cond = eval_func(n.condition, loop_env)
            if is_error(cond):
                return cond
            if not is_truthy(cond):
                break

        body = eval_func(n.body, loop_env)
        if is_error(body):
            return body

        if n.post is not None:
            post = eval_func(n.post, loop_env)
            if is_error(post):
                return post

    return NULL

def eval_switch(n: SwitchStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    """
    With a subject, the first case whose value equals it runs.
    Without one, the first case whose condition is truthy runs.
    """
    subject = None
    if n.subject is not None:
        subject = eval_func(n.subject, env)
        if is_error(subject):
            return subject

    for case in n.cases:
        cond = eval_func(case.condition, env)
        if is_error(cond):
            return cond

        matched = values_equal(subject, cond) if subject is not None else is_truthy(cond)
        if matched:
            return eval_statements(case.body, env, eval_func)

    return NULL
