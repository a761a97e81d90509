"""Live syntax colouring for the Monkey REPL.

Each input line is run through the interpreter's own lexer, so the colours
always agree with what the parser will see. Fragments carry prompt_toolkit
style classes (`class:mk.<group>`); `MONKEY_STYLE` maps them to colours.
"""

from __future__ import annotations

from typing import Callable, List

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

from .lexer_rd import tokenize
from .runtime import builtin_table
from .token_types import TT, Tok

MONKEY_STYLE = Style.from_dict(
    {
        "mk.keyword": "bold ansiblue",
        "mk.literal": "ansicyan",
        "mk.number": "ansimagenta",
        "mk.string": "ansigreen",
        "mk.call": "bold",
        "mk.builtin": "ansiyellow",
        "mk.comment": "italic ansibrightblack",
        "mk.illegal": "bg:ansired ansiwhite",
    }
)

_KEYWORD_TYPES = frozenset(
    {TT.FUNCTION, TT.LET, TT.RETURN, TT.IF, TT.ELSE, TT.FOR, TT.SWITCH, TT.CASE, TT.BREAK}
)
_GROUP_BY_TYPE = {
    TT.TRUE: "literal",
    TT.FALSE: "literal",
    TT.INT: "number",
    TT.HEX: "number",
    TT.STRING: "string",
    TT.ILLEGAL: "illegal",
}

def style_for(group: str) -> str:
    return f"class:mk.{group}" if group else ""

def _group(tok: Tok, following: TT) -> str:
    if tok.type in _KEYWORD_TYPES:
        return "keyword"
    if tok.type == TT.IDENT and following == TT.LPAREN:
        return "builtin" if tok.literal in builtin_table() else "call"
    return _GROUP_BY_TYPE.get(tok.type, "")

def _source_span(tok: Tok) -> str:
    # STRING literals come back from the lexer without their quotes
    return f'"{tok.literal}"' if tok.type == TT.STRING else tok.literal

def _split_tail(tail: str) -> StyleAndTextTuples:
    """Whatever follows the last token: blanks, maybe a `#` comment."""
    before, hash_mark, comment = tail.partition("#")
    fragments: StyleAndTextTuples = []
    if before:
        fragments.append(("", before))
    if hash_mark:
        fragments.append((style_for("comment"), hash_mark + comment))
    return fragments

def highlight_line(line: str) -> StyleAndTextTuples:
    """Styled fragments for one line; joining their text gives `line` back."""
    if not line:
        return [("", "")]

    tokens: List[Tok] = list(tokenize(line))
    fragments: StyleAndTextTuples = []
    cursor = 0

    for tok, nxt in zip(tokens, tokens[1:]):
        start = tok.column - 1
        span = _source_span(tok)

        if start > cursor:
            fragments.append(("", line[cursor:start]))
        fragments.append((style_for(_group(tok, nxt.type)), span))
        cursor = start + len(span)

    fragments.extend(_split_tail(line[cursor:]))
    return fragments

class MonkeyLexer(Lexer):
    """prompt_toolkit lexer backed by the Monkey tokenizer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        rows = [highlight_line(text) for text in document.lines]

        def get_line(lineno: int) -> StyleAndTextTuples:
            return rows[lineno] if lineno < len(rows) else [("", "")]

        return get_line
