"""
##################################
Quadrature (:mod:`cotes.quad`)
##################################

.. currentmodule:: cotes.quad

This module provides Newton--Cotes rules and composite integration.

Rules
=====

.. autosummary::
    :toctree: generated/

    Rule
    NewtonCotesRule
    SimpleRule
    generate
    getrule

Predefined rules
----------------

============= ======================= ====== ===================
Name          Coefficients            Open   Degree of precision
============= ======================= ====== ===================
``midpoint``  ``[1]``                 yes    1
``trapezoid`` ``[1, 1]``              no     1
``simpson``   ``[1, 4, 1]``           no     3
``boole``     ``[7, 32, 12, 32, 7]``  no     5
``milne``     ``[2, -1, 2]``          yes    3
============= ======================= ====== ===================

They are also available by name from the read-only mapping ``RULES``.

Composite integration
=====================

.. autosummary::
    :toctree: generated/

    composite
    composite_vectorized
    partition

Context
=======

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext

Exceptions
==========

.. autosummary::
    :toctree: generated/

    QuadratureError
    InvalidRuleError
    InvalidArgumentError
    EvaluationError

"""

from . import formula
from .composite import composite, composite_vectorized, partition
from .context import Context, getcontext, localcontext, setcontext
from .exceptions import (
    EvaluationError,
    InvalidArgumentError,
    InvalidRuleError,
    QuadratureError,
)
from .rule import (
    RULES,
    NewtonCotesRule,
    Rule,
    SimpleRule,
    boole,
    generate,
    getrule,
    midpoint,
    milne,
    simpson,
    trapezoid,
)

__all__ = [
    "formula",
    "composite",
    "composite_vectorized",
    "partition",
    "Context",
    "getcontext",
    "localcontext",
    "setcontext",
    "EvaluationError",
    "InvalidArgumentError",
    "InvalidRuleError",
    "QuadratureError",
    "RULES",
    "NewtonCotesRule",
    "Rule",
    "SimpleRule",
    "boole",
    "generate",
    "getrule",
    "midpoint",
    "milne",
    "simpson",
    "trapezoid",
]
