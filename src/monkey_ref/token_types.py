"""
Token Types for the Monkey lexer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum


class TT(Enum):
    """Token Types. The value is the display name used in parse errors."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Literals
    IDENT = "IDENT"
    INT = "INT"
    HEX = "HEX"
    STRING = "STRING"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    PERCENT = "%"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="
    AND = "&&"
    DOUBLE_PLUS = "++"

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    RETURN = "RETURN"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    FOR = "FOR"
    SWITCH = "SWITCH"
    CASE = "CASE"
    BREAK = "BREAK"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    literal: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.literal!r}, {self.line}:{self.column})"
