from __future__ import annotations

import sys
from textwrap import dedent

import pytest

from tests.support.harness import Environment, run_in, run_program, run_runtime_case, verify_result
from monkey_ref.utils import DEFAULT_RECURSION_LIMIT, RECURSION_LIMIT_VAR

SCENARIOS = [
    pytest.param("fn(x) { x + 1; }(5)", ("int", 6), None, id="immediate-call"),
    pytest.param("let identity = fn(x) { x; }; identity(5);", ("int", 5), None, id="identity"),
    pytest.param("let identity = fn(x) { return x; }; identity(5);", ("int", 5), None, id="identity-return"),
    pytest.param("let double = fn(x) { x * 2; }; double(5);", ("int", 10), None, id="double"),
    pytest.param("let add = fn(x, y) { x + y; }; add(5, 5);", ("int", 10), None, id="two-args"),
    pytest.param("let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));", ("int", 20), None, id="nested-call-args"),
    pytest.param("fn(x) { x; }(5)", ("int", 5), None, id="literal-call"),
    pytest.param("fn() { }()", ("null", None), None, id="empty-body-is-null"),
    pytest.param("fn(x) { x }", ("fn", "fn(x) {...}"), None, id="fn-value"),
    pytest.param("fn(a, b) { a }", ("inspect", "fn(a, b) {...}"), None, id="fn-inspect"),
    pytest.param(
        "let add = fn(a, b) { a + b }; add(1, 2, 3)",
        ("int", 3),
        None,
        id="extra-args-ignored",
    ),
    pytest.param(
        "let f = fn(a, b) { a }; f(1)",
        ("int", 1),
        None,
        id="missing-unused-arg-is-fine",
    ),
    pytest.param(
        "let f = fn(a, b) { b }; f(1)",
        ("error", "identifier not found: b"),
        None,
        id="missing-arg-is-unbound",
    ),
    pytest.param(
        dedent(
            """\
            let newAdder = fn(x) {
              fn(y) { x + y };
            };
            let addTwo = newAdder(2);
            addTwo(2);
            """
        ),
        ("int", 4),
        None,
        id="closure",
    ),
    pytest.param(
        dedent(
            """\
            let count = 0;
            let peek = fn() { count; };
            let count = 5;
            peek();
            """
        ),
        ("int", 5),
        None,
        id="closure-sees-later-rebinding",
    ),
    pytest.param(
        dedent(
            """\
            let fib = fn(n) {
              if (n < 2) { return n; }
              fib(n - 1) + fib(n - 2);
            };
            fib(15);
            """
        ),
        ("int", 610),
        None,
        id="recursion",
    ),
    pytest.param(
        dedent(
            """\
            let apply = fn(f, x) { f(x) };
            apply(fn(n) { n * n }, 7);
            """
        ),
        ("int", 49),
        None,
        id="higher-order",
    ),
    pytest.param(
        dedent(
            """\
            let x = 10;
            let shadow = fn(x) { x * 2 };
            shadow(3) + x;
            """
        ),
        ("int", 16),
        None,
        id="param-shadows-outer",
    ),
    pytest.param(
        dedent(
            """\
            let f = fn() { let inner = 1; inner };
            f();
            inner;
            """
        ),
        ("error", "identifier not found: inner"),
        None,
        id="locals-do-not-leak",
    ),
    pytest.param(
        dedent(
            """\
            let counter = fn() {
              let n = 0;
              fn() { n++; n };
            };
            let c = counter();
            c(); c(); c();
            """
        ),
        ("int", 3),
        None,
        id="closure-increments-captured-binding",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_closure_captures_environment_by_reference() -> None:
    env = Environment()
    run_in(env, "let count = 0;", "let peek = fn() { count; };")

    verify_result(run_program("peek()", env), "int", 0)
    run_program("let count = 42;", env)
    verify_result(run_program("peek()", env), "int", 42)


def test_functions_capture_defining_scope_not_call_site() -> None:
    source = dedent(
        """\
        let x = "outer";
        let get = fn() { x };
        let call = fn(x) { get() };
        call("inner");
        """
    )
    verify_result(run_program(source), "string", "outer")


COUNTDOWN = "let f = fn(n) { if (n == 0) { 0 } else { 1 + f(n - 1) } };"

MAP = dedent(
    """\
    let map = fn(arr, f) {
      let iter = fn(arr, acc) {
        if (len(arr) == 0) { acc } else { iter(rest(arr), push(acc, f(first(arr)))) }
      };
      iter(arr, []);
    };
    """
)


@pytest.mark.parametrize(
    "source, expectation",
    [
        pytest.param(COUNTDOWN + "f(45)", ("int", 45), id="recursion-45"),
        pytest.param(COUNTDOWN + "f(500)", ("int", 500), id="recursion-500"),
        pytest.param(
            MAP + "let xs = [" + ", ".join(str(i) for i in range(200)) + "]; len(map(xs, fn(x) { x * 2 }))",
            ("int", 200),
            id="map-200-elements",
        ),
        pytest.param(
            MAP + "let xs = [" + ", ".join(str(i) for i in range(200)) + "]; last(map(xs, fn(x) { x * 2 }))",
            ("int", 398),
            id="map-200-last-element",
        ),
    ],
)
def test_deep_finite_recursion_at_default_limit(source: str, expectation, restore_recursion_limit) -> None:
    sys.setrecursionlimit(1000)

    result = run_program(source)
    verify_result(result, *expectation)


def test_evaluate_only_raises_the_recursion_limit(restore_recursion_limit) -> None:
    sys.setrecursionlimit(DEFAULT_RECURSION_LIMIT + 5000)

    run_program("1")
    assert sys.getrecursionlimit() == DEFAULT_RECURSION_LIMIT + 5000


def test_recursion_limit_env_overrides_default(monkeypatch: pytest.MonkeyPatch, restore_recursion_limit) -> None:
    monkeypatch.setenv(RECURSION_LIMIT_VAR, "3000")

    run_program("1")
    assert sys.getrecursionlimit() == 3000
