import contextlib
import contextvars
from typing import Literal, Self

type Summation = Literal["COMPENSATED", "NAIVE"]


class Context:
    """Create a new context.

    A context collects the settings shared by rules and integrators. Each thread and
    each asynchronous task sees its own current context.

    Parameters
    ----------
    check_finite : bool, default=True
        If `check_finite` is ``True``, every value of the integrand must be a finite
        number; otherwise, :class:`EvaluationError` is raised. Values that are not
        numbers at all are always rejected.
    summation : Literal["COMPENSATED", "NAIVE"], default="COMPENSATED"
        How :func:`composite` adds the contributions of subintervals. If `summation`
        is ``"COMPENSATED"``, :func:`cotes.function.fsum` is used; if ``"NAIVE"``,
        contributions are added from left to right.
    max_workers : int, default=1
        Number of threads used to evaluate subintervals. If `max_workers` is 1,
        everything runs in the calling thread.
    """

    __slots__ = ("_check_finite", "_summation", "_max_workers")
    _check_finite: bool
    _summation: Summation
    _max_workers: int

    def __init__(
        self,
        check_finite: bool = True,
        summation: Summation = "COMPENSATED",
        max_workers: int = 1,
    ):
        if summation not in ("COMPENSATED", "NAIVE"):
            raise ValueError(f"unknown summation mode: {summation!r}")

        if isinstance(max_workers, bool) or not isinstance(max_workers, int):
            raise TypeError("max_workers must be an integer")

        if max_workers < 1:
            raise ValueError("max_workers must be positive")

        self._check_finite = bool(check_finite)
        self._summation = summation
        self._max_workers = max_workers

    @property
    def check_finite(self) -> bool:
        return self._check_finite

    @property
    def summation(self) -> Summation:
        return self._summation

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def copy(self) -> Self:
        return self.__class__(self._check_finite, self._summation, self._max_workers)

    def __str__(self):
        return (
            f"{type(self).__name__}(check_finite={self._check_finite!r}, "
            f"summation={self._summation!r}, max_workers={self._max_workers!r})"
        )

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("quad")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    if not isinstance(ctx, Context):
        raise TypeError

    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None,
    *,
    check_finite: bool | None = None,
    summation: Summation | None = None,
    max_workers: int | None = None,
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Keyword arguments override the corresponding settings of the copy.

    Examples
    --------
    >>> with localcontext(summation="NAIVE") as ctx:
    ...     print(ctx.summation)
    NAIVE
    >>> print(getcontext().summation)
    COMPENSATED
    """
    if ctx is None:
        ctx = getcontext()

    if check_finite is None:
        check_finite = ctx._check_finite

    if summation is None:
        summation = ctx._summation

    if max_workers is None:
        max_workers = ctx._max_workers

    ctx = Context(check_finite, summation, max_workers)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)
