from __future__ import annotations

from typing import Callable, Optional

from .runtime import (
    Environment,
    MkInteger,
    MkString,
    MkValue,
    NULL,
    ReturnSignal,
    new_error,
)
from .types import native_bool
from .utils import apply_recursion_limit
from .tree import (
    ArrayLiteral,
    BlockStatement,
    Boolean,
    CallExpression,
    DoublePlusStatement,
    ExpressionStatement,
    ForExpression,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    SwitchStatement,
)

from .eval.control import (
    eval_block,
    eval_double_plus,
    eval_for,
    eval_if,
    eval_let,
    eval_program,
    eval_return,
    eval_switch,
)
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_call, eval_fn_literal
from .eval.literals import eval_array, eval_hash, eval_index

# Each handler receives eval_node as its third argument
NodeHandler = Callable[[Node, Environment, Callable[[Node, Environment], MkValue]], MkValue]

# ---------------- Public API ----------------

def evaluate(node: Node, env: Optional[Environment] = None) -> MkValue:
    """
    Evaluate `node` and return its value. A stray `return` outside any
    function unwraps here the same way it does at a program boundary.
    """
    if env is None:
        env = Environment()

    apply_recursion_limit()
    try:
        return eval_node(node, env)
    except ReturnSignal as signal:
        return signal.value

# ---------------- Core evaluator ----------------

def eval_node(n: Optional[Node], env: Environment) -> MkValue:
    if n is None:
        return NULL

    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        return new_error("unsupported node: %s", type(n).__name__)

    return handler(n, env, eval_node)

def _eval_identifier(n: Identifier, env: Environment, eval_func) -> MkValue:
    value = env.get(n.value)
    if value is None:
        return new_error("identifier not found: %s", n.value)
    return value

def _eval_expression_stmt(n: ExpressionStatement, env: Environment, eval_func) -> MkValue:
    return eval_func(n.expression, env)

_NODE_DISPATCH: dict[type, NodeHandler] = {
    Program: eval_program,
    BlockStatement: eval_block,
    ExpressionStatement: _eval_expression_stmt,
    LetStatement: eval_let,
    ReturnStatement: eval_return,
    DoublePlusStatement: eval_double_plus,
    SwitchStatement: eval_switch,
    Identifier: _eval_identifier,
    IntegerLiteral: lambda n, _env, _ev: MkInteger(n.value),
    StringLiteral: lambda n, _env, _ev: MkString(n.value),
    Boolean: lambda n, _env, _ev: native_bool(n.value),
    PrefixExpression: eval_prefix,
    InfixExpression: eval_infix,
    IfExpression: eval_if,
    ForExpression: eval_for,
    FunctionLiteral: eval_fn_literal,
    CallExpression: eval_call,
    ArrayLiteral: eval_array,
    HashLiteral: eval_hash,
    IndexExpression: eval_index,
}
