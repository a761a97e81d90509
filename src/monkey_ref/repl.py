"""Interactive Monkey shell built on prompt_toolkit.

One Environment lives for the whole session, so bindings made on one line
are visible on the next. Lines starting with `/` are shell commands rather
than Monkey source.
"""

from __future__ import annotations

import sys
from typing import Callable, List, NamedTuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import tokenize
from .repl_highlight import MONKEY_STYLE, MonkeyLexer
from .runner import ParseError, repl_eval, report_fatal
from .runtime import Environment
from .token_types import TT
from .utils import FALSY_FLAGS, TRUTHY_FLAGS, apply_recursion_limit, debug_py_trace_enabled, set_debug_py_trace

PROMPT = ">> "
CONTINUATION = ".. "
INDENT = "    "

# Pasted text sometimes carries these; the lexer would turn them into ILLEGAL
_STRIP_CHARS = dict.fromkeys(map(ord, "\u200b\u200c\u200d\u2060\ufeff\r"))
_NBSP = {ord("\u00a0"): " "}

_OPENERS = {TT.LPAREN, TT.LBRACKET, TT.LBRACE}
_CLOSERS = {TT.RPAREN, TT.RBRACKET, TT.RBRACE}

EnvBox = List[Environment]

def bracket_depth(text: str) -> int:
    """Brackets, braces and parens left open at the end of `text`."""
    depth = 0

    for tok in tokenize(text):
        if tok.type in _OPENERS:
            depth += 1
        elif tok.type in _CLOSERS and depth:
            depth -= 1

    return depth

def clean_input(text: str) -> str:
    return text.translate(_STRIP_CHARS).translate(_NBSP)

# ---------- Shell commands ----------

class ShellCommand(NamedTuple):
    summary: str
    usage: str
    run: Callable[[str, EnvBox], None]

def _cmd_clear(arg: str, box: EnvBox) -> None:
    clear()

def _cmd_reset(arg: str, box: EnvBox) -> None:
    box[0] = Environment()
    print("Environment reset.")

def _cmd_py_traceback(arg: str, box: EnvBox) -> None:
    flag = arg.lower()

    if not flag:
        set_debug_py_trace(not debug_py_trace_enabled())
    elif flag in TRUTHY_FLAGS:
        set_debug_py_trace(True)
    elif flag in FALSY_FLAGS:
        set_debug_py_trace(False)
    else:
        print(f"usage: /py-traceback {SHELL_COMMANDS['/py-traceback'].usage}", file=sys.stderr)
        return

    print("Python traceback:", "on" if debug_py_trace_enabled() else "off")

def _cmd_help(arg: str, box: EnvBox) -> None:
    for name, command in SHELL_COMMANDS.items():
        print(f"  {(name + ' ' + command.usage).strip():<24} {command.summary}")

SHELL_COMMANDS = {
    "/clear": ShellCommand("clear the screen", "", _cmd_clear),
    "/help": ShellCommand("list shell commands", "", _cmd_help),
    "/py-traceback": ShellCommand("show Python tracebacks for fatal errors", "[on|off]", _cmd_py_traceback),
    "/reset": ShellCommand("forget every binding", "", _cmd_reset),
}

def handle_slash(line: str, box: EnvBox) -> bool:
    """Run `line` as a shell command if it is one; report whether it was."""
    line = line.strip()
    if not line.startswith("/"):
        return False

    name, _, arg = line.partition(" ")
    command = SHELL_COMMANDS.get(name)

    if command is None:
        print(f"Unknown command: {name} (try /help)", file=sys.stderr)
    else:
        command.run(arg.strip(), box)
    return True

class _CommandCompleter(Completer):
    def get_completions(self, document, complete_event):
        typed = document.text_before_cursor
        if not typed.startswith("/") or " " in typed:
            return

        for name, command in SHELL_COMMANDS.items():
            if name.startswith(typed):
                yield Completion(name, start_position=-len(typed), display_meta=command.summary)

# ---------- Session ----------

def _key_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("enter")
    def _submit_or_continue(event):
        buffer = event.current_buffer
        text = buffer.text

        depth = 0 if text.lstrip().startswith("/") else bracket_depth(text)
        if depth:
            buffer.insert_text("\n" + INDENT * depth)
        else:
            buffer.validate_and_handle()

    return kb

def _session() -> PromptSession[str]:
    return PromptSession(
        history=InMemoryHistory(),
        lexer=MonkeyLexer(),
        style=MONKEY_STYLE,
        completer=_CommandCompleter(),
        complete_while_typing=True,
        key_bindings=_key_bindings(),
        multiline=True,
        prompt_continuation=CONTINUATION,
    )

def repl() -> None:
    apply_recursion_limit()
    box: EnvBox = [Environment()]
    session = _session()

    print("monkey repl: Ctrl-D to exit, /help for commands")

    while True:
        try:
            text = clean_input(session.prompt(PROMPT))
        except KeyboardInterrupt:
            continue
        except EOFError:
            print()
            return

        if not text.strip() or handle_slash(text, box):
            continue

        try:
            value, quiet = repl_eval(text, box[0])
        except ParseError as exc:
            print(exc.render(), file=sys.stderr)
            continue
        except RecursionError as exc:
            report_fatal(exc)
            raise SystemExit(2) from None

        if not quiet:
            print(value.inspect())
