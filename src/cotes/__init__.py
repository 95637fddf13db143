from .quad import (
    RULES,
    boole,
    composite,
    generate,
    getrule,
    midpoint,
    milne,
    simpson,
    trapezoid,
)

__all__ = [
    "RULES",
    "boole",
    "composite",
    "generate",
    "getrule",
    "midpoint",
    "milne",
    "simpson",
    "trapezoid",
]
