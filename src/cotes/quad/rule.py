import fractions
import logging
import numbers
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Self

import mpmath

from cotes import function as ctf
from cotes.quad.context import Context, getcontext
from cotes.quad.exceptions import EvaluationError, InvalidRuleError
from cotes.typing import ComparableScalar, Integrand

logger = logging.getLogger(__name__)


class Rule[T: ComparableScalar](ABC):
    """Abstract base class for simple quadrature rules.

    A rule approximates the definite integral of an integrand over a single interval.
    Rules are immutable and may be shared freely, including between threads.

    Calling a rule as ``rule(fun, a, b)`` returns

    * zero if `a` equals `b`, without evaluating `fun`;
    * the negated estimate over ``[b, a]`` if `a` is greater than `b`;
    * the estimate over ``[a, b]`` otherwise.

    Raises
    ------
    EvaluationError
        If `a`, `b`, or ``b - a`` is not finite, or if `fun` returns a value that is
        not a number (or, when :attr:`Context.check_finite` is ``True``, not finite).
    """

    __slots__ = ()

    def __call__(self, fun: Integrand[T], a: T, b: T) -> T:
        _checkbounds(a, b)

        if a == b:
            return a - a

        if a > b:
            return -self._integrate(fun, b, a)

        return self._integrate(fun, a, b)

    @abstractmethod
    def _integrate(self, fun: Callable[[T], T], a: T, b: T) -> T:
        """Approximate the integral of `fun` over ``[a, b]``, where ``a < b``."""
        raise NotImplementedError


class SimpleRule[T: ComparableScalar](Rule[T]):
    """Rule defined by a hand-written formula.

    Parameters
    ----------
    formula : Callable
        Function with calling signature ``formula(fun, a, b)``. It is only invoked
        with ``a < b``.
    name : str, optional
        Name used in :func:`repr` (the default is the name of `formula`).

    Examples
    --------
    >>> from cotes.quad import composite, formula
    >>> rule = SimpleRule(formula.trapezoid)
    >>> print(format(composite(rule, lambda x: x**2, 0.0, 1.0, 100), ".6f"))
    0.333350
    """

    __slots__ = ("_formula", "_name")
    _formula: Callable
    _name: str

    def __init__(self, formula: Callable, name: str | None = None):
        if not callable(formula):
            raise TypeError

        self._formula = formula
        self._name = name if name is not None else getattr(formula, "__name__", "rule")

    @property
    def name(self) -> str:
        return self._name

    def _integrate(self, fun, a, b):
        ctx = getcontext()
        return self._formula(lambda x: _evaluate(fun, x, ctx), a, b)

    def __repr__(self):
        return f"{type(self).__name__}({self._name})"


class NewtonCotesRule[T: ComparableScalar](Rule[T]):
    r"""Newton--Cotes rule.

    The rule samples the integrand at evenly spaced nodes and weights the samples by
    `coefficients`. Let :math:`c_0,\dots,c_{k-1}` be the coefficients and
    :math:`h=(b-a)/m`, where :math:`m=k-1` for closed rules and :math:`m=k+1` for
    open rules. Then the estimate is

    .. math::

        \frac{b-a}{\sum_i c_i}\sum_{i=0}^{k-1}c_i f(x_i),

    where :math:`x_i=a+ih` for closed rules and :math:`x_i=a+(i+1)h` for open rules.
    Closed rules thus sample both endpoints, while open rules sample interior points
    only.

    This class is usually not instantiated directly, but is created by
    :func:`generate`.

    Parameters
    ----------
    coefficients : Iterable
        Weights of the nodes. They must be finite real numbers whose sum is nonzero.
    open : bool, default=False
        Whether the rule is open.

    Raises
    ------
    InvalidRuleError
        If `coefficients` is empty, contains anything other than finite real numbers,
        or sums to zero, or if a closed rule has only one coefficient.
    """

    __slots__ = ("_coefficients", "_open", "_total")
    _coefficients: tuple[Any, ...]
    _open: bool
    _total: Any

    def __init__(self, coefficients: Iterable, open: bool = False):
        coefficients = tuple(coefficients)

        if not coefficients:
            raise InvalidRuleError("coefficient vector must not be empty")

        for c in coefficients:
            if not _isreal(c):
                raise InvalidRuleError(f"coefficient must be a real number: {c!r}")

            if not ctf.isfinite(c):
                raise InvalidRuleError(f"coefficient must be finite: {c!r}")

        if not open and len(coefficients) < 2:
            raise InvalidRuleError("closed rule requires at least two coefficients")

        total = sum(coefficients)

        if total == 0:
            raise InvalidRuleError("coefficients must not sum to zero")

        self._coefficients = coefficients
        self._open = bool(open)
        self._total = total

    @property
    def coefficients(self) -> tuple[Any, ...]:
        """Weights of the nodes."""
        return self._coefficients

    @property
    def open(self) -> bool:
        """``True`` if and only if the rule samples interior points only."""
        return self._open

    @property
    def npoints(self) -> int:
        """Number of nodes at which the integrand is evaluated."""
        return len(self._coefficients)

    @property
    def divisions(self) -> int:
        """Number of equal steps the interval is divided into by the nodes."""
        k = len(self._coefficients)
        return k + 1 if self._open else k - 1

    @property
    def degree(self) -> int:
        """Degree of precision.

        The rule integrates every polynomial whose degree does not exceed `degree`
        exactly, up to rounding errors. The value is computed in rational
        arithmetic.

        Examples
        --------
        >>> simpson.degree
        3
        """
        zero = fractions.Fraction(0)
        one = fractions.Fraction(1)
        nodes = self.nodes(zero, one)
        weights = tuple(_torational(c) for c in self._coefficients)
        total = sum(weights)
        result = 0

        for d in range(1, len(weights) + 2):
            approx = sum(w * x**d for w, x in zip(weights, nodes)) / total

            if approx != fractions.Fraction(1, d + 1):
                break

            result = d

        return result

    def nodes(self, a: T, b: T) -> tuple[T, ...]:
        """Return the points at which the integrand is evaluated over ``[a, b]``.

        For closed rules the last node is exactly `b`.

        Examples
        --------
        >>> boole.nodes(0.0, 1.0)
        (0.0, 0.25, 0.5, 0.75, 1.0)
        >>> milne.nodes(0.0, 1.0)
        (0.25, 0.5, 0.75)
        """
        k = len(self._coefficients)
        h = (b - a) / self.divisions

        if self._open:
            return tuple(a + h * (i + 1) for i in range(k))

        return tuple(a + h * i for i in range(k - 1)) + (b,)

    def weights(self, a: T, b: T) -> tuple[T, ...]:
        """Return the weights multiplied to the values at :meth:`nodes`."""
        scale = (b - a) / self._total
        return tuple(scale * c for c in self._coefficients)

    def _integrate(self, fun, a, b):
        ctx = getcontext()
        values = (_evaluate(fun, x, ctx) for x in self.nodes(a, b))
        terms = [c * y for c, y in zip(self._coefficients, values)]
        return (b - a) / self._total * _accumulate(terms, ctx)

    def __eq__(self, rhs):
        if not isinstance(rhs, NewtonCotesRule):
            return NotImplemented

        return self._open == rhs._open and self._coefficients == rhs._coefficients

    def __hash__(self):
        return hash((type(self).__name__, self._coefficients, self._open))

    def __repr__(self):
        return f"{type(self).__name__}({list(self._coefficients)!r}, open={self._open})"

    def __copy__(self) -> Self:
        return self


def generate(coefficients: Sequence, open: bool = False) -> NewtonCotesRule:
    """Generate a Newton--Cotes rule from a coefficient vector.

    Parameters
    ----------
    coefficients : Sequence
        Weights of the evenly spaced nodes.
    open : bool, default=False
        If `open` is ``True``, the nodes exclude both endpoints of the interval;
        otherwise, the first and last nodes are the endpoints.

    Returns
    -------
    NewtonCotesRule

    Raises
    ------
    InvalidRuleError
        If `coefficients` is empty or sums to zero.

    Examples
    --------
    >>> rule = generate([1, 3, 3, 1])
    >>> rule.degree
    3
    >>> print(format(rule(lambda x: x**3, 0.0, 2.0), ".6f"))
    4.000000
    """
    rule = NewtonCotesRule(coefficients, open)
    logger.debug("Generated %r", rule)
    return rule


def getrule(name: str) -> NewtonCotesRule:
    """Return the predefined rule called `name`.

    Raises
    ------
    KeyError
        If no rule is called `name`.

    Examples
    --------
    >>> getrule("simpson") is simpson
    True
    """
    try:
        return RULES[name]
    except KeyError:
        raise KeyError(f"unknown rule: {name!r}") from None


def _isreal(x: Any) -> bool:
    if isinstance(x, mpmath.mpf):
        return True

    return isinstance(x, numbers.Real)


def _torational(x: Any) -> fractions.Fraction:
    if isinstance(x, mpmath.mpf):
        sign, man, exp, _ = x._mpf_
        value = fractions.Fraction(int(man)) * fractions.Fraction(2) ** int(exp)
        return -value if sign else value

    return fractions.Fraction(x)


def _checkbounds(a: Any, b: Any) -> None:
    if not (ctf.isfinite(a) and ctf.isfinite(b)):
        raise EvaluationError(f"integration bounds must be finite: [{a!r}, {b!r}]")

    if not ctf.isfinite(b - a):
        raise EvaluationError(f"width of [{a!r}, {b!r}] is not finite")


def _evaluate(fun: Callable, x: Any, ctx: Context) -> Any:
    y = fun(x)

    try:
        finite = ctf.isfinite(y)
    except TypeError:
        raise EvaluationError(
            f"integrand returned a non-numeric value at {x!r}: {y!r}"
        ) from None

    if ctx.check_finite and not finite:
        raise EvaluationError(f"integrand returned a non-finite value at {x!r}: {y!r}")

    return y


def _accumulate(values: Sequence, ctx: Context) -> Any:
    if ctx.summation == "NAIVE":
        return sum(values)

    return ctf.fsum(values)


midpoint = generate([1], open=True)
trapezoid = generate([1, 1], open=False)
simpson = generate([1, 4, 1], open=False)
boole = generate([7, 32, 12, 32, 7], open=False)
milne = generate([2, -1, 2], open=True)

RULES: Mapping[str, NewtonCotesRule] = MappingProxyType(
    {
        "midpoint": midpoint,
        "trapezoid": trapezoid,
        "simpson": simpson,
        "boole": boole,
        "milne": milne,
    }
)
