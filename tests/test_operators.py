from __future__ import annotations

import pytest

from tests.support.harness import run_program, run_runtime_case

SCENARIOS = [
    pytest.param("5", ("int", 5), None, id="int-literal"),
    pytest.param("-5", ("int", -5), None, id="negate"),
    pytest.param("--5", ("int", 5), None, id="double-negate"),
    pytest.param("5 + 5 + 5 + 5 - 10", ("int", 10), None, id="sum-chain"),
    pytest.param("2 * 2 * 2 * 2 * 2", ("int", 32), None, id="product-chain"),
    pytest.param("-50 + 100 + -50", ("int", 0), None, id="mixed-signs"),
    pytest.param("5 * 2 + 10", ("int", 20), None, id="product-then-sum"),
    pytest.param("5 + 2 * 10", ("int", 25), None, id="sum-then-product"),
    pytest.param("50 / 2 * 2 + 10", ("int", 60), None, id="div-left-assoc"),
    pytest.param("2 * (5 + 10)", ("int", 30), None, id="grouped"),
    pytest.param("(5 + 10 * 2 + 15 / 3) * 2 + -10", ("int", 50), None, id="long-expression"),
    pytest.param("7 / 2", ("int", 3), None, id="div-truncates"),
    pytest.param("-7 / 2", ("int", -3), None, id="div-negative-truncates-toward-zero"),
    pytest.param("7 / -2", ("int", -3), None, id="div-negative-divisor"),
    pytest.param("-7 / -2", ("int", 3), None, id="div-both-negative"),
    pytest.param("7 % 3", ("int", 1), None, id="mod"),
    pytest.param("-7 % 2", ("int", -1), None, id="mod-sign-follows-dividend"),
    pytest.param("7 % -2", ("int", 1), None, id="mod-negative-divisor"),
    pytest.param("-7 % -2", ("int", -1), None, id="mod-both-negative"),
    pytest.param("0x1F", ("int", 31), None, id="hex-literal"),
    pytest.param("0xff + 1", ("int", 256), None, id="hex-arith"),
    pytest.param("010", ("int", 8), None, id="leading-zero-is-octal"),
    pytest.param("0777 + 1", ("int", 512), None, id="octal-arith"),
    pytest.param("00", ("int", 0), None, id="double-zero"),
    pytest.param("0", ("int", 0), None, id="plain-zero"),
    pytest.param("9223372036854775807 + 1", ("int", -(2**63)), None, id="add-wraps"),
    pytest.param("-9223372036854775807 - 2", ("int", 2**63 - 1), None, id="sub-wraps"),
    pytest.param("4611686018427387904 * 2", ("int", -(2**63)), None, id="mul-wraps"),
    pytest.param("1 < 2", ("bool", True), None, id="lt"),
    pytest.param("1 > 2", ("bool", False), None, id="gt"),
    pytest.param("1 < 1", ("bool", False), None, id="lt-equal"),
    pytest.param("1 == 1", ("bool", True), None, id="int-eq"),
    pytest.param("1 != 1", ("bool", False), None, id="int-not-eq"),
    pytest.param("1 != 2", ("bool", True), None, id="int-not-eq-true"),
    pytest.param("true == true", ("bool", True), None, id="bool-eq"),
    pytest.param("true != false", ("bool", True), None, id="bool-not-eq"),
    pytest.param("(1 < 2) == true", ("bool", True), None, id="compare-then-eq"),
    pytest.param("(1 > 2) == true", ("bool", False), None, id="compare-then-eq-false"),
    pytest.param("!true", ("bool", False), None, id="bang-true"),
    pytest.param("!false", ("bool", True), None, id="bang-false"),
    pytest.param("!5", ("bool", False), None, id="bang-int-is-truthy"),
    pytest.param("!0", ("bool", False), None, id="bang-zero-is-truthy"),
    pytest.param('!""', ("bool", False), None, id="bang-empty-string-is-truthy"),
    pytest.param("!!true", ("bool", True), None, id="double-bang"),
    pytest.param("!!5", ("bool", True), None, id="double-bang-int"),
    pytest.param('"Hello" + " " + "World!"', ("string", "Hello World!"), None, id="string-concat"),
    pytest.param('"a" == "a"', ("bool", True), None, id="string-eq"),
    pytest.param('"a" != "b"', ("bool", True), None, id="string-not-eq"),
    pytest.param('"a" == "b"', ("bool", False), None, id="string-eq-false"),
    pytest.param("let a = [1]; a == a", ("bool", True), None, id="array-identity-same"),
    pytest.param("[1] == [1]", ("bool", False), None, id="array-identity-distinct"),
    pytest.param("let f = fn() { 1 }; f == f", ("bool", True), None, id="fn-identity"),
    pytest.param("let n = if (false) { 1 }; n == n", ("bool", True), None, id="null-eq-null"),
    pytest.param("len == len", ("bool", True), None, id="builtin-identity"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize(
    "a, b",
    [
        pytest.param(a, b, id=f"{a}-by-{b}")
        for a, b in [(7, 2), (-7, 2), (7, -2), (-7, -2), (1, 3), (-1, 3), (100, 7), (-100, 7), (0, 5)]
    ],
)
def test_division_and_remainder_are_consistent(a: int, b: int) -> None:
    q = run_program(f"{a} / {b}").value
    r = run_program(f"{a} % {b}").value

    assert q * b + r == a
    assert abs(r) < abs(b)
    assert r == 0 or (r < 0) == (a < 0)
