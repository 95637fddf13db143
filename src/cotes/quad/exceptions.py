class QuadratureError(Exception):
    """Base class of errors raised by :mod:`cotes.quad`."""


class InvalidRuleError(QuadratureError, ValueError):
    """Error raised when a coefficient vector cannot define a rule.

    This is raised at generation time, never while a rule is being evaluated.
    """


class InvalidArgumentError(QuadratureError, ValueError):
    """Error raised when the number of divisions is not a positive integer."""


class EvaluationError(QuadratureError, ArithmeticError):
    """Error raised when an integration bound or a value of the integrand is not a
    finite number.

    Exceptions raised by the integrand itself are not wrapped in this class; they
    propagate to the caller unchanged.
    """
