"""
Lexer for Monkey - Recursive Descent Parser front end

Tokenizes Monkey source code into a stream of tokens.

Features:
- Single-pass, pull-based tokenization (`next_token`)
- Position tracking (line, column)
- Hex integer literals kept verbatim for base-aware parsing later
- Never raises: unknown input becomes ILLEGAL tokens
"""

from typing import Iterator, List

from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    Each call to `next_token()` scans exactly one token. Once the input is
    exhausted every further call returns EOF.
    """

    # Keyword mapping
    KEYWORDS = {
        'fn': TT.FUNCTION,
        'let': TT.LET,
        'return': TT.RETURN,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'if': TT.IF,
        'else': TT.ELSE,
        'for': TT.FOR,
        'switch': TT.SWITCH,
        'case': TT.CASE,
        'break': TT.BREAK,
    }

    # Two-character operators, checked with one character of lookahead
    DOUBLE_OPERATORS = {
        '==': TT.EQ,
        '!=': TT.NOT_EQ,
        '++': TT.DOUBLE_PLUS,
        '&&': TT.AND,
    }

    SINGLE_OPERATORS = {
        '=': TT.ASSIGN,
        '+': TT.PLUS,
        '-': TT.MINUS,
        '!': TT.BANG,
        '*': TT.ASTERISK,
        '/': TT.SLASH,
        '%': TT.PERCENT,
        '<': TT.LT,
        '>': TT.GT,
        ',': TT.COMMA,
        ';': TT.SEMICOLON,
        ':': TT.COLON,
        '(': TT.LPAREN,
        ')': TT.RPAREN,
        '{': TT.LBRACE,
        '}': TT.RBRACE,
        '[': TT.LBRACKET,
        ']': TT.RBRACKET,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Tok]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending with EOF"""
        return list(self)

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_trivia()

        line, column = self.line, self.column
        ch = self.peek()

        if ch == '\0' and self.pos >= len(self.source):
            return Tok(TT.EOF, '', line, column)

        if ch == '"':
            return self.scan_string(line, column)

        if _is_digit(ch):
            return self.scan_number(line, column)

        if ch.isalpha() or ch == '_':
            return self.scan_identifier(line, column)

        return self.scan_operator(line, column)

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self, line: int, column: int) -> Tok:
        """Scan string literal: "..." (no escape processing)"""
        self.advance()  # opening quote
        start = self.pos

        while self.pos < len(self.source) and self.peek() != '"':
            self.advance()

        if self.pos >= len(self.source):
            # Unterminated: hand the tail to the parser as ILLEGAL
            return Tok(TT.ILLEGAL, self.source[start - 1:], line, column)

        value = self.source[start:self.pos]
        self.advance()  # closing quote
        return Tok(TT.STRING, value, line, column)

    def scan_number(self, line: int, column: int) -> Tok:
        """Scan decimal or 0x-prefixed hexadecimal integer literal"""
        start = self.pos

        if self.peek() == '0' and self.peek(1) in ('x', 'X') and _is_hex_digit(self.peek(2)):
            self.advance(2)
            while _is_hex_digit(self.peek()):
                self.advance()
            return Tok(TT.HEX, self.source[start:self.pos], line, column)

        while _is_digit(self.peek()):
            self.advance()

        return Tok(TT.INT, self.source[start:self.pos], line, column)

    def scan_identifier(self, line: int, column: int) -> Tok:
        """Scan identifier or keyword"""
        start = self.pos

        while self.peek().isalnum() or self.peek() == '_':
            self.advance()

        value = self.source[start:self.pos]
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return Tok(token_type, value, line, column)

    def scan_operator(self, line: int, column: int) -> Tok:
        """Scan operators and punctuation"""
        pair = self.peek() + self.peek(1)
        if pair in self.DOUBLE_OPERATORS:
            self.advance(2)
            return Tok(self.DOUBLE_OPERATORS[pair], pair, line, column)

        ch = self.advance()
        token_type = self.SINGLE_OPERATORS.get(ch, TT.ILLEGAL)
        return Tok(token_type, ch, line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]
        for ch in result:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += len(result)
        return result

    def skip_trivia(self) -> None:
        """Skip whitespace, newlines and `#` line comments"""
        while self.pos < len(self.source):
            ch = self.peek()
            if ch in (' ', '\t', '\r', '\n'):
                self.advance()
            elif ch == '#':
                while self.pos < len(self.source) and self.peek() != '\n':
                    self.advance()
            else:
                return


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_hex_digit(ch: str) -> bool:
    return ch != '\0' and ch in '0123456789abcdefABCDEF'


def tokenize(source: str) -> Iterator[Tok]:
    """Lazily tokenize source; the sequence ends with a single EOF token"""
    return iter(Lexer(source))
