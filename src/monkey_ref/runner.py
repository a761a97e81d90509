from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .evaluator import evaluate
from .lexer_rd import tokenize
from .parser_rd import parse
from .runtime import Environment, MkError, MkValue, NULL
from .tree import LetStatement, Program, dump
from .types import MonkeyError
from .utils import apply_recursion_limit, debug_py_trace_enabled

class ParseError(MonkeyError):
    """Raised by the shells when a source text has syntax errors."""

    def __init__(self, errors: Sequence[str]):
        super().__init__("\n".join(errors))
        self.errors: List[str] = list(errors)

    def render(self) -> str:
        return "\n".join(f"\t{msg}" for msg in self.errors)

def parse_or_raise(src: str) -> Program:
    result = parse(tokenize(src))
    if not result.ok:
        raise ParseError(result.errors)
    return result.program

def run(src: str, env: Optional[Environment] = None) -> MkValue:
    """Parse and evaluate `src`. Any syntax error aborts before evaluation."""
    program = parse_or_raise(src)
    return evaluate(program, env if env is not None else Environment())

def repl_eval(src: str, env: Environment) -> Tuple[MkValue, bool]:
    """
    Evaluate one REPL entry against a persistent environment.
    Returns (value, quiet); quiet entries print nothing.
    """
    program = parse_or_raise(src)
    result = evaluate(program, env)

    last = program.statements[-1] if program.statements else None
    quiet = result is NULL or isinstance(last, LetStatement)
    return result, quiet

def report_fatal(exc: BaseException) -> None:
    print(f"fatal: {exc}", file=sys.stderr)
    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_exception(exc)), file=sys.stderr, end="")

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg

def _read_file(path: str) -> str:
    candidate = Path(path)
    if not candidate.is_file():
        raise SystemExit(f"File not found: {path}")
    return candidate.read_text(encoding="utf-8")

def main(argv: Optional[Sequence[str]] = None) -> None:
    show_ast = False
    path = None
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--ast":
            show_ast = True
            continue

        if token.startswith("--file="):
            path = token.split("=", 1)[1]
            continue

        if token == "--file":
            try:
                path = next(it)
            except StopIteration:
                raise SystemExit("--file flag requires a path") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if path is not None and arg is not None:
        raise SystemExit(f"Unexpected argument: {arg}")

    if path is None and arg is None and sys.stdin.isatty():
        from .repl import repl  # prompt_toolkit only needed interactively

        repl()
        return

    source = _read_file(path) if path is not None else _load_source(arg)
    apply_recursion_limit()

    try:
        if show_ast:
            print(dump(parse_or_raise(source)))
            return
        result = run(source)
    except ParseError as exc:
        print("parser errors:", file=sys.stderr)
        print(exc.render(), file=sys.stderr)
        raise SystemExit(1) from None
    except RecursionError as exc:
        report_fatal(exc)
        raise SystemExit(2) from None

    if isinstance(result, MkError):
        print(result.inspect(), file=sys.stderr)
        raise SystemExit(1)

    if result is not NULL:
        print(result.inspect())

if __name__ == "__main__":
    main()
