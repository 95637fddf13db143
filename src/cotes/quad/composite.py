import concurrent.futures
import contextvars
import itertools
import logging
import math
import numbers
from collections.abc import Callable
from typing import Any

import numpy as np
import numpy.typing as npt

from cotes import function as ctf
from cotes.quad.context import getcontext
from cotes.quad.exceptions import EvaluationError, InvalidArgumentError
from cotes.quad.rule import (
    NewtonCotesRule,
    Rule,
    SimpleRule,
    _accumulate,
    _checkbounds,
)
from cotes.typing import ComparableScalar, Integrand

logger = logging.getLogger(__name__)


def partition[T: ComparableScalar](a: T, b: T, n: int) -> tuple[T, ...]:
    """Return ``n + 1`` evenly spaced breakpoints from `a` to `b`.

    The first breakpoint is `a` and the last one is exactly `b`.

    Parameters
    ----------
    a : ComparableScalar
        First breakpoint.
    b : ComparableScalar
        Last breakpoint.
    n : int
        Number of divisions. `n` must be a positive integer.

    Raises
    ------
    InvalidArgumentError
        If `n` is not a positive integer.

    Examples
    --------
    >>> partition(0.0, 1.0, 4)
    (0.0, 0.25, 0.5, 0.75, 1.0)
    >>> from fractions import Fraction
    >>> partition(Fraction(0), Fraction(1), 3)
    (Fraction(0, 1), Fraction(1, 3), Fraction(2, 3), Fraction(1, 1))
    """
    n = _checkdivisions(n)
    h = (b - a) / n
    return tuple(a + h * i for i in range(n)) + (b,)


def composite[T: ComparableScalar](
    rule: Rule[T] | Callable, fun: Integrand[T], a: T, b: T, n: int
) -> T:
    """Integrate `fun` from `a` to `b` using a composite rule.

    ``[a, b]`` is divided into `n` subintervals of equal width, and the estimates of
    `rule` over the subintervals are summed.

    Parameters
    ----------
    rule : Rule | Callable
        Simple rule. Any callable with calling signature ``rule(fun, a, b)`` is
        accepted.
    fun : Callable
        Integrand. `fun` must be an univariate scalar-valued function.
    a : ComparableScalar
        Lower limit of integration.
    b : ComparableScalar
        Upper limit of integration.
    n : int
        Number of divisions. `n` must be a positive integer.

    Returns
    -------
    ComparableScalar
        Zero if `a` equals `b`, in which case neither `rule` nor `fun` is invoked. If
        `a` is greater than `b`, the result is the negated integral from `b` to `a`.

    Raises
    ------
    InvalidArgumentError
        If `n` is not a positive integer. Nothing is evaluated in this case.
    EvaluationError
        If `a`, `b`, or ``b - a`` is not finite, or if `fun` returns a value that is
        not a number (or, when :attr:`Context.check_finite` is ``True``, not finite).
        Exceptions raised by `fun` itself propagate unchanged.

    Warnings
    --------
    For smooth integrands the error decreases as `n` grows and as rules of higher
    degree are used, but only until rounding errors dominate. For :class:`float`, this
    happens roughly when the truncation error falls below :math:`10^{-16}` times the
    magnitude of the integral; larger `n` then only accumulates rounding errors, and
    rules with negative coefficients, such as :data:`milne`, amplify cancellation.
    Use :mod:`mpmath` numbers or :class:`fractions.Fraction` for `a` and `b` to go
    beyond this limit.

    Notes
    -----
    The subintervals are independent of each other. If :attr:`Context.max_workers` is
    greater than 1, they are evaluated concurrently by a thread pool, and the results
    are summed in the order of the subintervals so that the result does not depend
    on scheduling.

    Examples
    --------
    >>> import math
    >>> from cotes.quad import simpson
    >>> print(format(composite(simpson, math.sin, 0.0, math.pi, 10), ".6f"))
    2.000007
    """
    if not callable(rule):
        raise TypeError

    if not isinstance(rule, Rule):
        rule = SimpleRule(rule)

    n = _checkdivisions(n)
    _checkbounds(a, b)

    if a == b:
        return a - a

    if a > b:
        return -composite(rule, fun, b, a, n)

    ctx = getcontext()
    mesh = itertools.pairwise(partition(a, b, n))
    logger.debug("Integrating over [%r, %r] with %r and n=%d", a, b, rule, n)

    if ctx.max_workers == 1 or n == 1:
        values = [rule(fun, x, y) for x, y in mesh]
    else:
        workers = min(ctx.max_workers, n)

        with concurrent.futures.ThreadPoolExecutor(workers) as executor:
            futures = [
                executor.submit(contextvars.copy_context().run, rule, fun, x, y)
                for x, y in mesh
            ]
            try:
                values = [future.result() for future in futures]
            except BaseException:
                executor.shutdown(cancel_futures=True)
                raise

    return _accumulate(values, ctx)


def composite_vectorized(
    rule: NewtonCotesRule, fun: Callable, a: float, b: float, n: int
) -> float:
    """Integrate a vectorized function from `a` to `b` using a composite rule.

    Unlike :func:`composite`, `fun` is called only once, with a two-dimensional
    :class:`numpy.ndarray` of shape ``(n, rule.npoints)`` whose rows are the nodes of
    each subinterval. Computation is done in double precision.

    Parameters
    ----------
    rule : NewtonCotesRule
        Newton--Cotes rule.
    fun : Callable
        Integrand. `fun` must map an array to an array of the same shape elementwise.
    a : float
        Lower limit of integration.
    b : float
        Upper limit of integration.
    n : int
        Number of divisions. `n` must be a positive integer.

    Returns
    -------
    float

    Raises
    ------
    InvalidArgumentError
        If `n` is not a positive integer.
    EvaluationError
        If `a`, `b`, or ``b - a`` is not finite, or if `fun` returns an array of a
        wrong shape, of non-numeric values, or (when :attr:`Context.check_finite` is
        ``True``) with non-finite values.

    Examples
    --------
    >>> import numpy as np
    >>> from cotes.quad import simpson
    >>> print(format(composite_vectorized(simpson, np.sin, 0.0, np.pi, 10), ".6f"))
    2.000007
    """
    if not isinstance(rule, NewtonCotesRule):
        raise TypeError

    n = _checkdivisions(n)
    a = float(a)
    b = float(b)
    _checkbounds(a, b)

    if a == b:
        return 0.0

    if a > b:
        return -composite_vectorized(rule, fun, b, a, n)

    ctx = getcontext()
    mesh = np.linspace(a, b, n + 1)
    width = np.diff(mesh)
    nodes = _nodes(rule, mesh[:-1], width)

    if not rule.open:
        nodes[:, -1] = mesh[1:]

    values: npt.NDArray[Any] = np.asarray(fun(nodes))

    if values.dtype.kind not in "iuf":
        raise EvaluationError(f"integrand returned an array of {values.dtype}")

    if values.shape != nodes.shape:
        raise EvaluationError(
            f"integrand returned an array of shape {values.shape}, "
            f"expected {nodes.shape}"
        )

    if ctx.check_finite and not ctf.isfinite(values):
        raise EvaluationError("integrand returned a non-finite value")

    coefficients = np.array([float(c) for c in rule.coefficients])
    terms = width / float(sum(rule.coefficients)) * (values @ coefficients)
    logger.debug("Integrated over [%r, %r] with %r and n=%d", a, b, rule, n)

    if ctx.summation == "NAIVE":
        return float(np.sum(terms))

    return math.fsum(terms.tolist())


def _nodes(
    rule: NewtonCotesRule,
    lower: npt.NDArray[np.float64],
    width: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    k = rule.npoints
    offset = np.arange(1, k + 1) if rule.open else np.arange(k)
    return lower[:, np.newaxis] + np.outer(width, offset / rule.divisions)


def _checkdivisions(n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidArgumentError(f"number of divisions must be an integer: {n!r}")

    if n < 1:
        raise InvalidArgumentError(f"number of divisions must be positive: {n!r}")

    return int(n)
