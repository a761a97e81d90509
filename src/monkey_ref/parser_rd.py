"""
Recursive Descent Parser for Monkey

Structure:
- Lexer: Token stream from source (any iterable of Tok)
- Parser: Recursive descent for statements, Pratt parsing for expressions
- AST: frozen node classes from `tree.py`

Errors never raise: each one is recorded as a message and parsing resumes
at the next statement, so a single pass reports every syntax error.
"""

from enum import IntEnum
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from .lexer_rd import Lexer
from .token_types import TT, Tok
from .tree import (
    ArrayLiteral,
    BlockStatement,
    Boolean,
    CallExpression,
    CaseStatement,
    DoublePlusStatement,
    Expression,
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
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
    SwitchStatement,
)

INT64_MAX = 2**63 - 1

# ============================================================================
# Precedence
# ============================================================================

class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==
    LESSGREATER = 3  # > or <
    SUM = 4          # +
    PRODUCT = 5      # *
    PREFIX = 6       # -X or !X
    CALL = 7         # myfunction(X)
    INDEX = 8        # array[index]


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.SLASH: Precedence.PRODUCT,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.PERCENT: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
    TT.LBRACKET: Precedence.INDEX,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class ParseResult(NamedTuple):
    """Best-effort AST plus every diagnostic collected while building it."""
    program: Program
    errors: List[str]

    @property
    def ok(self) -> bool:
        return not self.errors

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. comparison (<, >)
    3. sum (+, -)
    4. product (*, /, %)
    5. prefix (-, !)
    6. call (f(x))
    7. index (a[i])

    The parser keeps a two-token window: `cur` is the token being parsed and
    `peek` is the one after it.
    """

    def __init__(self, tokens: Iterable[Tok]):
        self._tokens: Iterator[Tok] = iter(tokens)
        self.errors: List[str] = []
        self.cur = Tok(TT.EOF, '')
        self.peek = Tok(TT.EOF, '')

        self.prefix_parse_fns: Dict[TT, PrefixParseFn] = {
            TT.IDENT: self.parse_identifier,
            TT.INT: self.parse_integer_literal,
            TT.HEX: self.parse_integer_literal,
            TT.STRING: self.parse_string_literal,
            TT.BANG: self.parse_prefix_expression,
            TT.MINUS: self.parse_prefix_expression,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.LPAREN: self.parse_grouped_expression,
            TT.IF: self.parse_if_expression,
            TT.FOR: self.parse_for_expression,
            TT.FUNCTION: self.parse_function_literal,
            TT.LBRACKET: self.parse_array_literal,
            TT.LBRACE: self.parse_hash_literal,
        }

        self.infix_parse_fns: Dict[TT, InfixParseFn] = {
            TT.PLUS: self.parse_infix_expression,
            TT.MINUS: self.parse_infix_expression,
            TT.SLASH: self.parse_infix_expression,
            TT.ASTERISK: self.parse_infix_expression,
            TT.PERCENT: self.parse_infix_expression,
            TT.EQ: self.parse_infix_expression,
            TT.NOT_EQ: self.parse_infix_expression,
            TT.LT: self.parse_infix_expression,
            TT.GT: self.parse_infix_expression,
            TT.LPAREN: self.parse_call_expression,
            TT.LBRACKET: self.parse_index_expression,
        }

        # Fill the cur/peek window
        self.next_token()
        self.next_token()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def next_token(self) -> None:
        """Shift the window one token forward"""
        self.cur = self.peek
        self.peek = next(self._tokens, None) or Tok(TT.EOF, '', self.cur.line, self.cur.column)

    def cur_is(self, token_type: TT) -> bool:
        return self.cur.type == token_type

    def peek_is(self, token_type: TT) -> bool:
        return self.peek.type == token_type

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if the next token has the expected type, else record an error"""
        if self.peek_is(token_type):
            self.next_token()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur.type, Precedence.LOWEST)

    # ========================================================================
    # Errors
    # ========================================================================

    def peek_error(self, token_type: TT) -> None:
        self.errors.append(f"expected next token to be {token_type}, got {self.peek.type} instead")

    def cur_error(self, token_type: TT) -> None:
        self.errors.append(f"expected next token to be {token_type}, got {self.cur.type} instead")

    def no_prefix_parse_fn_error(self, token_type: TT) -> None:
        self.errors.append(f"no prefix parse function for {token_type} found")

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse statements until EOF"""
        first = self.cur
        statements: List[Statement] = []

        while not self.cur_is(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        return Program(first, tuple(statements))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        """
        Parse a single statement.

        Leaves `cur` on the statement's last token (its `;` if it had one).
        """
        if self.cur_is(TT.LET):
            return self.parse_let_statement()
        if self.cur_is(TT.RETURN):
            return self.parse_return_statement()
        if self.cur_is(TT.DOUBLE_PLUS):
            return self.parse_prefix_double_plus_statement()
        if self.cur_is(TT.IDENT) and self.peek_is(TT.DOUBLE_PLUS):
            return self.parse_postfix_double_plus_statement()
        if self.cur_is(TT.SWITCH):
            return self.parse_switch_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        """let IDENT = expr [;]"""
        let_tok = self.cur

        if not self.expect_peek(TT.IDENT):
            return None
        name = Identifier(self.cur, self.cur.literal)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        """return expr [;]"""
        ret_tok = self.cur

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return ReturnStatement(ret_tok, value)

    def parse_prefix_double_plus_statement(self) -> Optional[DoublePlusStatement]:
        """++IDENT [;]"""
        incr_tok = self.cur

        if not self.expect_peek(TT.IDENT):
            return None
        name = Identifier(self.cur, self.cur.literal)

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return DoublePlusStatement(incr_tok, name)

    def parse_postfix_double_plus_statement(self) -> DoublePlusStatement:
        """IDENT++ [;]"""
        name = Identifier(self.cur, self.cur.literal)
        self.next_token()
        incr_tok = self.cur

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return DoublePlusStatement(incr_tok, name)

    def parse_expression_statement(self) -> ExpressionStatement:
        start = self.cur
        expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return ExpressionStatement(start, expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse `{ stmts }` with `cur` on the opening brace"""
        open_tok = self.cur
        statements: List[Statement] = []

        self.next_token()

        while not self.cur_is(TT.RBRACE) and not self.cur_is(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        if self.cur_is(TT.EOF):
            self.cur_error(TT.RBRACE)

        return BlockStatement(open_tok, tuple(statements))

    def parse_switch_statement(self) -> Optional[SwitchStatement]:
        """
        switch [subject] { case cond: stmts... break; ... }

        A case's statements run up to its `break`; there is no fallthrough.
        """
        switch_tok = self.cur
        subject: Optional[Expression] = None

        if not self.peek_is(TT.LBRACE):
            self.next_token()
            subject = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.LBRACE):
            return None

        cases: List[CaseStatement] = []
        while self.peek_is(TT.CASE):
            self.next_token()
            case = self.parse_case_statement()
            if case is None:
                return None
            cases.append(case)

        if not self.expect_peek(TT.RBRACE):
            return None

        return SwitchStatement(switch_tok, subject, tuple(cases))

    def parse_case_statement(self) -> Optional[CaseStatement]:
        """case cond: stmts... break [;]"""
        case_tok = self.cur

        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.COLON):
            return None

        body: List[Statement] = []
        while not self.peek_is(TT.BREAK):
            if self.peek_is(TT.EOF) or self.peek_is(TT.CASE) or self.peek_is(TT.RBRACE):
                self.peek_error(TT.BREAK)
                return None
            self.next_token()
            stmt = self.parse_statement()
            if stmt is not None:
                body.append(stmt)

        self.next_token()  # break
        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return CaseStatement(case_tok, condition, tuple(body))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """
        Pratt loop: parse a prefix expression, then fold in infix operators
        while the next one binds tighter than `precedence`.
        """
        prefix = self.prefix_parse_fns.get(self.cur.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur.type)
            return None

        left = prefix()

        while left is not None and not self.peek_is(TT.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek.type)
            if infix is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur, self.cur.literal)

    def parse_integer_literal(self) -> Optional[Expression]:
        literal = self.cur.literal
        if self.cur_is(TT.HEX):
            base = 16
        elif len(literal) > 1 and literal.startswith('0'):
            base = 8  # leading zero means octal; 09 is rejected below
        else:
            base = 10

        try:
            value = int(literal, base)
        except ValueError:
            value = None

        if value is None or value > INT64_MAX:
            self.errors.append(f'could not parse "{literal}" as integer')
            return None

        return IntegerLiteral(self.cur, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur, self.cur.literal)

    def parse_boolean(self) -> Expression:
        return Boolean(self.cur, self.cur_is(TT.TRUE))

    def parse_prefix_expression(self) -> Expression:
        op_tok = self.cur
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(op_tok, op_tok.literal, right)

    def parse_infix_expression(self, left: Expression) -> Expression:
        op_tok = self.cur
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(op_tok, left, op_tok.literal, right)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None

        return expression

    def parse_if_expression(self) -> Optional[Expression]:
        """if (cond) { cons } [else { alt }]"""
        if_tok = self.cur

        if not self.expect_peek(TT.LPAREN):
            return None

        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None
        if not self.expect_peek(TT.LBRACE):
            return None

        consequence = self.parse_block_statement()
        alternative = None

        if self.peek_is(TT.ELSE):
            self.next_token()
            if not self.expect_peek(TT.LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(if_tok, condition, consequence, alternative)

    def parse_for_expression(self) -> Optional[Expression]:
        """for (init; cond; post) { body }"""
        for_tok = self.cur

        if not self.expect_peek(TT.LPAREN):
            return None

        self.next_token()
        init = self.parse_statement()
        if not self.cur_is(TT.SEMICOLON):
            self.cur_error(TT.SEMICOLON)
            return None

        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TT.SEMICOLON):
            return None

        self.next_token()
        post = self.parse_statement()

        if not self.expect_peek(TT.RPAREN):
            return None
        if not self.expect_peek(TT.LBRACE):
            return None

        body = self.parse_block_statement()
        return ForExpression(for_tok, init, condition, post, body)

    def parse_function_literal(self) -> Optional[Expression]:
        """fn(params) { body }"""
        fn_tok = self.cur

        if not self.expect_peek(TT.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None

        body = self.parse_block_statement()
        return FunctionLiteral(fn_tok, parameters, body)

    def parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        identifiers: List[Identifier] = []

        if self.peek_is(TT.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(TT.IDENT):
            return None
        identifiers.append(Identifier(self.cur, self.cur.literal))

        while self.peek_is(TT.COMMA):
            self.next_token()
            if not self.expect_peek(TT.IDENT):
                return None
            identifiers.append(Identifier(self.cur, self.cur.literal))

        if not self.expect_peek(TT.RPAREN):
            return None

        return tuple(identifiers)

    def parse_call_expression(self, function: Expression) -> Optional[Expression]:
        call_tok = self.cur
        arguments = self.parse_expression_list(TT.RPAREN)
        if arguments is None:
            return None
        return CallExpression(call_tok, function, arguments)

    def parse_array_literal(self) -> Optional[Expression]:
        open_tok = self.cur
        elements = self.parse_expression_list(TT.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(open_tok, elements)

    def parse_expression_list(self, end: TT) -> Optional[Tuple[Expression, ...]]:
        """Comma-separated expressions up to `end`; no trailing comma"""
        items: List[Expression] = []

        if self.peek_is(end):
            self.next_token()
            return ()

        self.next_token()
        item = self.parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self.peek_is(TT.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None

        return tuple(items)

    def parse_index_expression(self, left: Expression) -> Optional[Expression]:
        open_tok = self.cur

        self.next_token()
        index = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RBRACKET):
            return None

        return IndexExpression(open_tok, left, index)

    def parse_hash_literal(self) -> Optional[Expression]:
        """{ key: value, ... }"""
        open_tok = self.cur
        pairs: List[Tuple[Expression, Expression]] = []

        if self.peek_is(TT.RBRACE):
            self.next_token()
            return HashLiteral(open_tok, ())

        while True:
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)
            if key is None:
                return None

            if not self.expect_peek(TT.COLON):
                return None

            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            if value is None:
                return None
            pairs.append((key, value))

            if not self.peek_is(TT.COMMA):
                break
            self.next_token()

        if not self.expect_peek(TT.RBRACE):
            return None

        return HashLiteral(open_tok, tuple(pairs))

# ============================================================================
# Entry Points
# ============================================================================

def parse(tokens: Iterable[Tok]) -> ParseResult:
    """Parse a token stream into a Program plus the collected syntax errors."""
    parser = Parser(tokens)
    program = parser.parse_program()
    return ParseResult(program, list(parser.errors))


def parse_source(source: str) -> ParseResult:
    """Tokenize and parse Monkey source text."""
    return parse(Lexer(source))


if __name__ == '__main__':
    import sys

    from .tree import dump

    result = parse_source(sys.stdin.read())
    if not result.ok:
        for msg in result.errors:
            print(f"\t{msg}", file=sys.stderr)
        sys.exit(1)
    print(dump(result.program), end='')
