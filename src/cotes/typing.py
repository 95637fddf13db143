"""
############################
Typing (:mod:`cotes.typing`)
############################

This module provides type definitions shared by rules and integrators.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

.. autoclass:: ComparableScalar
    :show-inheritance:
    :no-members:

.. autoclass:: Integrand
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Protocol, Self


class Scalar(Protocol):
    """Protocol for values that rules can weight and sum.

    Objects implementing this protocol must support the four arithmetic operations,
    and those operations must be compatible with integers. :class:`float`,
    :class:`fractions.Fraction`, and :class:`mpmath.mpf` all satisfy it.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __radd__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rsub__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rmul__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rtruediv__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...


class ComparableScalar(Scalar, Protocol):
    """Protocol for ordered :class:`Scalar`, like a real number.

    Integration bounds must be comparable so that reversed intervals can be
    detected.
    """

    __slots__ = ()

    @abstractmethod
    def __lt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __gt__(self, rhs: Self) -> bool: ...


class Integrand[T: Scalar](Protocol):
    """Univariate function ``fun(x)`` to be integrated."""

    def __call__(self, x: T, /) -> T: ...
