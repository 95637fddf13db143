"""
#############################################
Mathematical functions (:mod:`cotes.function`)
#############################################

.. currentmodule:: cotes.function

This module provides mathematical functions that follow the type of their argument,
so that an integrand written once can be evaluated over :class:`float`,
:class:`fractions.Fraction`, :mod:`mpmath` numbers, and :mod:`numpy` arrays.

Constant functions
==================

.. autosummary::
    :toctree: generated/

    pi

Elementary functions
====================

.. autosummary::
    :toctree: generated/

    cos
    exp
    log
    sin
    sqrt

Utilities
=========

.. autosummary::
    :toctree: generated/

    fsum
    isfinite

"""

import cmath
import decimal
import fractions
import math
from collections.abc import Iterable
from typing import Any

import mpmath
import mpmath.ctx_mp_python
import numpy as np


def pi(x: Any, /) -> Any:
    """Pi, in the precision of `x`.

    Examples
    --------
    >>> print(format(pi(1.0), ".6f"))
    3.141593
    >>> import mpmath
    >>> with mpmath.workdps(30):
    ...     print(pi(mpmath.mpf(1)))
    3.14159265358979323846264338328
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return +mpmath.pi

        case np.ndarray() | np.generic():
            return np.pi

        case float() | int() | fractions.Fraction():
            return math.pi

        case _:
            raise TypeError


def cos(x: Any, /) -> Any:
    """Cosine.

    Examples
    --------
    >>> print(format(cos(1), ".6f"))
    0.540302
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.cos(x)

        case np.ndarray() | np.generic():
            return np.cos(x)

        case float() | int() | fractions.Fraction():
            return math.cos(x)

        case _:
            raise TypeError


def exp(x: Any, /) -> Any:
    """Exponential.

    Examples
    --------
    >>> print(format(exp(2), ".6f"))
    7.389056
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.exp(x)

        case np.ndarray() | np.generic():
            return np.exp(x)

        case float() | int() | fractions.Fraction():
            return math.exp(x)

        case _:
            raise TypeError


def log(x: Any, /) -> Any:
    """Natural logarithm.

    Examples
    --------
    >>> print(format(log(5), ".6f"))
    1.609438
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.log(x)

        case np.ndarray() | np.generic():
            return np.log(x)

        case float() | int() | fractions.Fraction():
            return math.log(x)

        case _:
            raise TypeError


def sin(x: Any, /) -> Any:
    """Sine.

    Examples
    --------
    >>> print(format(sin(1), ".6f"))
    0.841471
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.sin(x)

        case np.ndarray() | np.generic():
            return np.sin(x)

        case float() | int() | fractions.Fraction():
            return math.sin(x)

        case _:
            raise TypeError


def sqrt(x: Any, /) -> Any:
    """Square root.

    Examples
    --------
    >>> print(format(sqrt(2.0), ".6f"))
    1.414214
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.sqrt(x)

        case np.ndarray() | np.generic():
            return np.sqrt(x)

        case float() | int() | fractions.Fraction():
            return math.sqrt(x)

        case _:
            raise TypeError


def isfinite(x: Any, /) -> bool:
    """Return ``True`` if and only if `x` is a finite number.

    For :mod:`numpy` arrays, ``True`` is returned if and only if every element is
    finite.

    Raises
    ------
    TypeError
        If `x` is not a number.

    Examples
    --------
    >>> isfinite(1.5), isfinite(float("nan"))
    (True, False)
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return bool(mpmath.isfinite(x))

        case np.ndarray() | np.generic():
            if not np.issubdtype(x.dtype, np.number):
                raise TypeError

            return bool(np.all(np.isfinite(x)))

        case int() | fractions.Fraction():
            return True

        case float():
            return math.isfinite(x)

        case complex():
            return cmath.isfinite(x)

        case decimal.Decimal():
            return x.is_finite()

        case _:
            raise TypeError


def fsum(values: Iterable[Any], /) -> Any:
    """Return an accurate sum of `values`.

    Floating-point values are added with :func:`math.fsum` and :mod:`mpmath` numbers
    with :func:`mpmath.fsum`, both of which avoid loss of precision from
    cancellation. Other values, such as :class:`fractions.Fraction`, are added
    exactly with :func:`sum`.

    Examples
    --------
    >>> fsum([0.1] * 10)
    1.0
    >>> sum([0.1] * 10)
    0.9999999999999999
    """
    values = list(values)
    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    if any(isinstance(x, mpnumeric) for x in values):
        return mpmath.fsum(values)

    if any(isinstance(x, float) for x in values) and all(
        isinstance(x, float | int) for x in values
    ):
        return math.fsum(values)

    return sum(values)
