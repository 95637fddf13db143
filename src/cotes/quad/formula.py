"""Hand-written simple rules.

These formulas are the textbook definitions of the midpoint and trapezoidal rules.
They can be used with :func:`cotes.quad.composite` through
:class:`cotes.quad.SimpleRule`, and agree with :data:`cotes.quad.midpoint` and
:data:`cotes.quad.trapezoid` up to rounding errors.
"""

from collections.abc import Callable

from cotes.typing import Scalar


def midpoint[T: Scalar](fun: Callable[[T], T], a: T, b: T) -> T:
    """Midpoint rule, ``(b - a) * fun((a + b) / 2)``."""
    return (b - a) * fun((a + b) / 2)


def trapezoid[T: Scalar](fun: Callable[[T], T], a: T, b: T) -> T:
    """Trapezoidal rule, ``(b - a) / 2 * (fun(a) + fun(b))``."""
    return (b - a) / 2 * (fun(a) + fun(b))
