import math
from fractions import Fraction

import mpmath
import pytest

from cotes.quad import formula
from cotes.quad.context import localcontext
from cotes.quad.exceptions import EvaluationError, InvalidRuleError
from cotes.quad.rule import (
    RULES,
    NewtonCotesRule,
    SimpleRule,
    boole,
    generate,
    getrule,
    midpoint,
    milne,
    simpson,
    trapezoid,
)

INTEGRANDS = [math.sin, math.exp, lambda x: x**3 - 2 * x, lambda x: 1 / (1 + x**2)]
INTERVALS = [(0.0, 1.0), (-2.5, 0.75), (1e-3, 3.0), (10.0, 10.5)]


def _unreachable(x):
    raise AssertionError(f"integrand evaluated at {x!r}")


def test_degenerate_interval():
    vectors = [[1], [1, 1], [1, 4, 1], [2, -1, 2], [3, -1], [0.5, 0.25]]

    for coefficients in vectors:
        for open in (True, False):
            if not open and len(coefficients) < 2:
                continue

            rule = generate(coefficients, open)
            assert rule(_unreachable, 0.7, 0.7) == 0
            assert rule(_unreachable, Fraction(1, 3), Fraction(1, 3)) == 0


def test_midpoint_matches_formula():
    for fun in INTEGRANDS:
        for a, b in INTERVALS:
            expected = formula.midpoint(fun, a, b)
            assert pytest.approx(expected, rel=1e-13, abs=1e-15) == midpoint(fun, a, b)


def test_trapezoid_matches_formula():
    for fun in INTEGRANDS:
        for a, b in INTERVALS:
            expected = formula.trapezoid(fun, a, b)
            assert pytest.approx(expected, rel=1e-13, abs=1e-15) == trapezoid(fun, a, b)


def test_simpson_matches_formula():
    for fun in INTEGRANDS:
        for a, b in INTERVALS:
            m = (a + b) / 2
            expected = (b - a) / 6 * (fun(a) + 4 * fun(m) + fun(b))
            assert pytest.approx(expected, rel=1e-13, abs=1e-15) == simpson(fun, a, b)


def test_milne_matches_formula():
    for fun in INTEGRANDS:
        for a, b in INTERVALS:
            h = (b - a) / 4
            values = (fun(a + h), fun(a + 2 * h), fun(a + 3 * h))
            expected = 4 * h / 3 * (2 * values[0] - values[1] + 2 * values[2])
            assert pytest.approx(expected, rel=1e-12, abs=1e-14) == milne(fun, a, b)


def test_degree():
    assert midpoint.degree == 1
    assert trapezoid.degree == 1
    assert simpson.degree == 3
    assert milne.degree == 3
    assert boole.degree == 5
    assert generate([1, 3, 3, 1]).degree == 3
    assert generate([0.5, 2.0, 0.5]).degree == 3
    assert generate([1, 2, 1]).degree == 1


def test_exact_arithmetic():
    zero, one = Fraction(0), Fraction(1)

    for d in range(6):
        assert boole(lambda x: x**d, zero, one) == Fraction(1, d + 1)

    assert simpson(lambda x: x**3, Fraction(1), Fraction(3)) == Fraction(20)
    assert milne(lambda x: x**2, Fraction(-1), Fraction(2)) == Fraction(3)


def test_mpmath_precision():
    with mpmath.workdps(40):
        a, b = mpmath.mpf(0), mpmath.mpf(1)
        value = boole(lambda x: x**5, a, b)
        assert isinstance(value, mpmath.mpf)
        assert abs(value - mpmath.mpf(1) / 6) < mpmath.mpf("1e-35")


def test_nodes():
    assert boole.nodes(0.0, 1.0) == (0.0, 0.25, 0.5, 0.75, 1.0)
    assert milne.nodes(0.0, 1.0) == (0.25, 0.5, 0.75)
    assert midpoint.nodes(2.0, 4.0) == (3.0,)

    for rule in RULES.values():
        nodes = rule.nodes(0.1, 0.7)
        assert len(nodes) == rule.npoints

        if rule.open:
            assert all(0.1 < x < 0.7 for x in nodes)
        else:
            assert nodes[0] == 0.1 and nodes[-1] == 0.7


def test_weights():
    weights = simpson.weights(Fraction(0), Fraction(3))
    assert weights == (Fraction(1, 2), Fraction(2), Fraction(1, 2))
    assert sum(milne.weights(Fraction(0), Fraction(1))) == 1


def test_reversed_interval():
    for rule in RULES.values():
        for fun in INTEGRANDS:
            assert rule(fun, 2.0, -0.5) == -rule(fun, -0.5, 2.0)


def test_invalid_rule():
    with pytest.raises(InvalidRuleError):
        generate([])

    with pytest.raises(InvalidRuleError):
        generate([1, -1])

    with pytest.raises(InvalidRuleError):
        generate([2, -1, -1], open=True)

    with pytest.raises(InvalidRuleError):
        generate([1], open=False)

    with pytest.raises(InvalidRuleError):
        generate(["1", "1"])

    with pytest.raises(InvalidRuleError):
        generate([1, float("nan")])

    with pytest.raises(InvalidRuleError):
        generate([1j, 1])

    with pytest.raises(ValueError):
        generate([0, 0, 0])


def test_equality():
    assert generate([1, 4, 1]) == simpson
    assert hash(generate([1, 4, 1])) == hash(simpson)
    assert generate([1, 4, 1], open=True) != simpson
    assert generate([Fraction(1), 4, 1]) == simpson
    assert repr(simpson) == "NewtonCotesRule([1, 4, 1], open=False)"
    assert len({midpoint, generate([1], open=True), trapezoid}) == 2


def test_registry():
    assert set(RULES) == {"midpoint", "trapezoid", "simpson", "boole", "milne"}
    assert getrule("boole") is boole
    assert all(isinstance(rule, NewtonCotesRule) for rule in RULES.values())

    with pytest.raises(KeyError):
        getrule("gauss")

    with pytest.raises(TypeError):
        RULES["gauss"] = simpson  # type: ignore


def test_simple_rule():
    rule = SimpleRule(formula.trapezoid)
    assert rule.name == "trapezoid"
    assert repr(rule) == "SimpleRule(trapezoid)"
    assert rule(math.exp, 0.0, 0.0) == 0
    assert rule(math.exp, 1.0, 0.0) == -rule(math.exp, 0.0, 1.0)
    assert pytest.approx(trapezoid(math.exp, 0.0, 1.0)) == rule(math.exp, 0.0, 1.0)

    with pytest.raises(TypeError):
        SimpleRule(42)  # type: ignore

    with pytest.raises(EvaluationError):
        rule(lambda x: None, 0.0, 1.0)


def test_integrand_error_propagates():
    error = RuntimeError("integrand failed")

    def fun(x):
        raise error

    with pytest.raises(RuntimeError) as excinfo:
        simpson(fun, 0.0, 1.0)

    assert excinfo.value is error

    with pytest.raises(ZeroDivisionError):
        trapezoid(lambda x: 1 / x, 0.0, 1.0)


def test_non_numeric_value():
    with pytest.raises(EvaluationError):
        simpson(lambda x: "one", 0.0, 1.0)

    with pytest.raises(EvaluationError):
        midpoint(lambda x: None, 0.0, 1.0)

    with localcontext(check_finite=False):
        with pytest.raises(EvaluationError):
            midpoint(lambda x: [x], 0.0, 1.0)


def test_non_finite_value():
    with pytest.raises(EvaluationError):
        simpson(lambda x: math.nan, 0.0, 1.0)

    with pytest.raises(EvaluationError):
        milne(lambda x: math.inf, 0.0, 1.0)

    with localcontext(check_finite=False):
        assert math.isnan(simpson(lambda x: math.nan, 0.0, 1.0))


def test_non_finite_bounds():
    with pytest.raises(EvaluationError):
        simpson(math.exp, 0.0, math.inf)

    with pytest.raises(EvaluationError):
        midpoint(math.exp, math.nan, 1.0)

    with pytest.raises(EvaluationError):
        trapezoid(math.exp, -math.inf, -math.inf)


def test_non_finite_width():
    for rule in RULES.values():
        with pytest.raises(EvaluationError):
            rule(_unreachable, -1e308, 1e308)

        with pytest.raises(EvaluationError):
            rule(_unreachable, 1e308, -1e308)

    with pytest.raises(EvaluationError):
        SimpleRule(formula.midpoint)(_unreachable, -1e308, 1e308)
