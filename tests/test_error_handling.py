from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import ParseError, run_program, run_runtime_case, verify_result
from monkey_ref.runtime import MkError, ReturnSignal

SCENARIOS = [
    pytest.param("5 + true;", ("error", "type mismatch: INTEGER + BOOLEAN"), None, id="int-plus-bool"),
    pytest.param("5 + true; 5;", ("error", "type mismatch: INTEGER + BOOLEAN"), None, id="error-stops-program"),
    pytest.param('1 == "1"', ("error", "type mismatch: INTEGER == STRING"), None, id="eq-across-types"),
    pytest.param("true != 1", ("error", "type mismatch: BOOLEAN != INTEGER"), None, id="not-eq-across-types"),
    pytest.param('"a" - "b"', ("error", "unknown operator: STRING - STRING"), None, id="string-minus"),
    pytest.param('"a" < "b"', ("error", "unknown operator: STRING < STRING"), None, id="string-lt"),
    pytest.param("-true", ("error", "unknown operator: -BOOLEAN"), None, id="negate-bool"),
    pytest.param('-"a"', ("error", "unknown operator: -STRING"), None, id="negate-string"),
    pytest.param("true + false;", ("error", "unknown operator: BOOLEAN + BOOLEAN"), None, id="bool-plus"),
    pytest.param("5; true + false; 5", ("error", "unknown operator: BOOLEAN + BOOLEAN"), None, id="error-mid-program"),
    pytest.param("if (10 > 1) { true + false; }", ("error", "unknown operator: BOOLEAN + BOOLEAN"), None, id="error-in-if"),
    pytest.param(
        dedent(
            """\
            if (10 > 1) {
              if (10 > 1) {
                return true + false;
              }
              return 1;
            }
            """
        ),
        ("error", "unknown operator: BOOLEAN + BOOLEAN"),
        None,
        id="error-in-nested-return",
    ),
    pytest.param("[1] + [2]", ("error", "unknown operator: ARRAY + ARRAY"), None, id="array-plus"),
    pytest.param("foobar", ("error", "identifier not found: foobar"), None, id="unbound-identifier"),
    pytest.param("1 / 0", ("error", "division by zero"), None, id="div-by-zero"),
    pytest.param("1 % 0", ("error", "division by zero"), None, id="mod-by-zero"),
    pytest.param("5(1)", ("error", "not a function: INTEGER"), None, id="call-integer"),
    pytest.param('"f"()', ("error", "not a function: STRING"), None, id="call-string"),
    pytest.param("let x = true; x++", ("error", "unknown operator: BOOLEAN++"), None, id="increment-bool"),
    pytest.param("y++", ("error", "identifier not found: y"), None, id="increment-unbound"),
    pytest.param("len(5) + 1", ("error", "argument to `len` not supported, got INTEGER"), None, id="error-short-circuits-infix"),
    pytest.param("1 + len(5)", ("error", "argument to `len` not supported, got INTEGER"), None, id="error-on-right-side"),
    pytest.param("-len(5)", ("error", "argument to `len` not supported, got INTEGER"), None, id="error-through-prefix"),
    pytest.param("!nope", ("error", "identifier not found: nope"), None, id="error-through-bang"),
    pytest.param("[1, nope, 3]", ("error", "identifier not found: nope"), None, id="error-in-array-element"),
    pytest.param('{"a": nope}', ("error", "identifier not found: nope"), None, id="error-in-hash-value"),
    pytest.param("{nope: 1}", ("error", "identifier not found: nope"), None, id="error-in-hash-key"),
    pytest.param("[1][nope]", ("error", "identifier not found: nope"), None, id="error-in-index"),
    pytest.param("nope[0]", ("error", "identifier not found: nope"), None, id="error-in-indexed"),
    pytest.param("nope(1)", ("error", "identifier not found: nope"), None, id="error-in-callee"),
    pytest.param("let f = fn(x) { x }; f(nope)", ("error", "identifier not found: nope"), None, id="error-in-argument"),
    pytest.param("if (nope) { 1 }", ("error", "identifier not found: nope"), None, id="error-in-condition"),
    pytest.param("let x = nope; 5", ("error", "identifier not found: nope"), None, id="error-in-let"),
    pytest.param("return nope; 5", ("error", "identifier not found: nope"), None, id="error-in-return"),
    pytest.param(
        "let f = fn() { 1 / 0 }; let g = fn() { f() + 1 }; g()",
        ("error", "division by zero"),
        None,
        id="error-crosses-calls",
    ),
    pytest.param("let x = 1 +;", None, ParseError, id="parse-error-raises"),
    pytest.param("puts(1); let = 2;", None, ParseError, id="parse-error-prevents-evaluation"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_error_handling(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_error_inspect() -> None:
    result = run_program("1 / 0")

    assert isinstance(result, MkError)
    assert result.type_name() == "ERROR"
    assert result.inspect() == "ERROR: division by zero"


def test_error_in_let_stops_before_binding() -> None:
    result = run_program("let a = 1 / 0; a")
    verify_result(result, "error", "division by zero")


def test_parse_error_carries_all_messages(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(ParseError) as exc_info:
        run_program("puts(1); let = 2; let y 3;")

    err = exc_info.value
    assert "expected next token to be IDENT, got = instead" in err.errors
    assert "expected next token to be =, got INT instead" in err.errors
    assert err.render().startswith("\t")
    assert capsys.readouterr().out == ""


def test_return_signal_never_escapes_run() -> None:
    try:
        result = run_program("let f = fn() { return 3; }; return f();")
    except ReturnSignal:  # pragma: no cover - failure path
        pytest.fail("ReturnSignal escaped the program boundary")

    verify_result(result, "int", 3)


def test_deep_recursion_raises_recursion_error() -> None:
    with pytest.raises(RecursionError):
        run_program("let f = fn(n) { f(n + 1) }; f(0)")
