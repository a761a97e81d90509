"""AST node classes produced by the parser and consumed by the evaluator.

Nodes are frozen dataclasses: the tree is never mutated once the parser
returns it. Every node keeps the token it started at, renders a canonical
fully-parenthesised source form via `str()`, and can be converted into a
`lark.Tree` for pretty-printed AST dumps.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from lark import Token as LarkToken, Tree as LarkTree
from typing_extensions import TypeAlias

from .token_types import Tok

DumpNode: TypeAlias = Union[LarkTree, LarkToken]


class Node:
    """Common interface for statements and expressions."""
    token: Tok

    def token_literal(self) -> str:
        return self.token.literal

    def to_tree(self) -> DumpNode:
        raise NotImplementedError(type(self).__name__)


class Statement(Node):
    pass


class Expression(Node):
    pass


def _s(node: Optional[Node]) -> str:
    return "" if node is None else str(node)


def _t(node: Optional[Node]) -> DumpNode:
    if node is None:
        return LarkTree('missing', [])
    return node.to_tree()


def _clause(node: Optional[Node]) -> str:
    return _s(node).rstrip(';')

# ---------- Root ----------

@dataclass(frozen=True)
class Program(Node):
    token: Tok
    statements: Tuple[Statement, ...]

    def token_literal(self) -> str:
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)

    def to_tree(self) -> LarkTree:
        return LarkTree('program', [s.to_tree() for s in self.statements])

# ---------- Statements ----------

@dataclass(frozen=True)
class LetStatement(Statement):
    token: Tok
    name: Identifier
    value: Optional[Expression]

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {_s(self.value)};"

    def to_tree(self) -> LarkTree:
        return LarkTree('let', [self.name.to_tree(), _t(self.value)])


@dataclass(frozen=True)
class ReturnStatement(Statement):
    token: Tok
    value: Optional[Expression]

    def __str__(self) -> str:
        return f"{self.token_literal()} {_s(self.value)};"

    def to_tree(self) -> LarkTree:
        return LarkTree('return', [_t(self.value)])


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    token: Tok
    expression: Optional[Expression]

    def __str__(self) -> str:
        return _s(self.expression)

    def to_tree(self) -> LarkTree:
        return LarkTree('expr_stmt', [_t(self.expression)])


@dataclass(frozen=True)
class BlockStatement(Statement):
    token: Tok
    statements: Tuple[Statement, ...]

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)

    def to_tree(self) -> LarkTree:
        return LarkTree('block', [s.to_tree() for s in self.statements])


@dataclass(frozen=True)
class DoublePlusStatement(Statement):
    """`x++` / `++x` increment sugar."""
    token: Tok
    name: Identifier

    def __str__(self) -> str:
        return f"{self.name}++"

    def to_tree(self) -> LarkTree:
        return LarkTree('incr', [self.name.to_tree()])


@dataclass(frozen=True)
class CaseStatement(Statement):
    token: Tok
    condition: Optional[Expression]
    body: Tuple[Statement, ...]

    def __str__(self) -> str:
        stmts = " ".join(str(s) for s in self.body)
        return f"case {_s(self.condition)}: {stmts} break;"

    def to_tree(self) -> LarkTree:
        return LarkTree('case', [_t(self.condition), LarkTree('body', [s.to_tree() for s in self.body])])


@dataclass(frozen=True)
class SwitchStatement(Statement):
    token: Tok
    subject: Optional[Expression]
    cases: Tuple[CaseStatement, ...]

    def __str__(self) -> str:
        head = "switch" if self.subject is None else f"switch {self.subject}"
        return head + " { " + " ".join(str(c) for c in self.cases) + " }"

    def to_tree(self) -> LarkTree:
        children = [] if self.subject is None else [LarkTree('subject', [self.subject.to_tree()])]
        return LarkTree('switch', children + [c.to_tree() for c in self.cases])

# ---------- Expressions ----------

@dataclass(frozen=True)
class Identifier(Expression):
    token: Tok
    value: str

    def __str__(self) -> str:
        return self.value

    def to_tree(self) -> LarkToken:
        return LarkToken('IDENT', self.value)


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    token: Tok
    value: int

    def __str__(self) -> str:
        return self.token.literal

    def to_tree(self) -> LarkToken:
        return LarkToken('INT', str(self.value))


@dataclass(frozen=True)
class StringLiteral(Expression):
    token: Tok
    value: str

    def __str__(self) -> str:
        return self.value

    def to_tree(self) -> LarkToken:
        return LarkToken('STRING', self.value)


@dataclass(frozen=True)
class Boolean(Expression):
    token: Tok
    value: bool

    def __str__(self) -> str:
        return self.token.literal

    def to_tree(self) -> LarkToken:
        return LarkToken('TRUE' if self.value else 'FALSE', self.token.literal)


@dataclass(frozen=True)
class PrefixExpression(Expression):
    token: Tok
    operator: str
    right: Optional[Expression]

    def __str__(self) -> str:
        return f"({self.operator}{_s(self.right)})"

    def to_tree(self) -> LarkTree:
        return LarkTree('prefix', [LarkToken('OP', self.operator), _t(self.right)])


@dataclass(frozen=True)
class InfixExpression(Expression):
    token: Tok
    left: Expression
    operator: str
    right: Optional[Expression]

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {_s(self.right)})"

    def to_tree(self) -> LarkTree:
        return LarkTree('infix', [self.left.to_tree(), LarkToken('OP', self.operator), _t(self.right)])


@dataclass(frozen=True)
class IfExpression(Expression):
    token: Tok
    condition: Optional[Expression]
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        out = f"if{_s(self.condition)} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out

    def to_tree(self) -> LarkTree:
        children = [_t(self.condition), self.consequence.to_tree()]
        if self.alternative is not None:
            children.append(LarkTree('else', [self.alternative.to_tree()]))
        return LarkTree('if', children)


@dataclass(frozen=True)
class ForExpression(Expression):
    token: Tok
    init: Optional[Statement]
    condition: Optional[Expression]
    post: Optional[Statement]
    body: BlockStatement

    def __str__(self) -> str:
        return f"for ({_clause(self.init)}; {_s(self.condition)}; {_clause(self.post)}) {self.body}"

    def to_tree(self) -> LarkTree:
        return LarkTree('for', [
            LarkTree('init', [_t(self.init)]),
            LarkTree('cond', [_t(self.condition)]),
            LarkTree('post', [_t(self.post)]),
            self.body.to_tree(),
        ])


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    token: Tok
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"

    def to_tree(self) -> LarkTree:
        params = LarkTree('params', [p.to_tree() for p in self.parameters])
        return LarkTree('fn', [params, self.body.to_tree()])


@dataclass(frozen=True)
class CallExpression(Expression):
    token: Tok
    function: Expression
    arguments: Tuple[Expression, ...]

    def __str__(self) -> str:
        args = ", ".join(_s(a) for a in self.arguments)
        return f"{self.function}({args})"

    def to_tree(self) -> LarkTree:
        args = LarkTree('args', [_t(a) for a in self.arguments])
        return LarkTree('call', [self.function.to_tree(), args])


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    token: Tok
    elements: Tuple[Expression, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(_s(e) for e in self.elements) + "]"

    def to_tree(self) -> LarkTree:
        return LarkTree('array', [_t(e) for e in self.elements])


@dataclass(frozen=True)
class IndexExpression(Expression):
    token: Tok
    left: Expression
    index: Optional[Expression]

    def __str__(self) -> str:
        return f"({self.left}[{_s(self.index)}])"

    def to_tree(self) -> LarkTree:
        return LarkTree('index', [self.left.to_tree(), _t(self.index)])


@dataclass(frozen=True)
class HashLiteral(Expression):
    token: Tok
    pairs: Tuple[Tuple[Expression, Expression], ...]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{_s(k)}:{_s(v)}" for k, v in self.pairs) + "}"

    def to_tree(self) -> LarkTree:
        return LarkTree('hash', [LarkTree('pair', [_t(k), _t(v)]) for k, v in self.pairs])


def dump(node: Node) -> str:
    """Return an indented, one-node-per-line rendering of `node`."""
    tree = node.to_tree()
    if isinstance(tree, LarkToken):
        return f"{tree.type}\t{tree.value!r}\n"
    return tree.pretty()
