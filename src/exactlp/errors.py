"""Exception hierarchy raised by the public exactlp operations."""

from __future__ import annotations

from typing import Any, Optional


class LPError(Exception):
    """Base class for every failure reported by exactlp."""


class ConstraintSyntaxError(LPError, ValueError):
    """A constraint or objective expression is malformed."""


class UnknownConstraintName(LPError, KeyError):
    def __init__(self, name: Any) -> None:
        super().__init__(f"No constraint named {name!r}.")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class DuplicateName(LPError, ValueError):
    def __init__(self, name: Any) -> None:
        super().__init__(f"A constraint named {name!r} already exists.")
        self.name = name


class Infeasible(LPError):
    """The constraint set admits no feasible point."""


class Unbounded(LPError):
    """The objective can be improved without limit."""


class MismatchedTotals(LPError, ValueError):
    """Transportation supplies and demands do not sum to the same total."""


class DimensionMismatch(LPError, ValueError):
    """A cost matrix, supply or demand vector has the wrong shape."""


class NotSolved(LPError):
    """Results were requested from a model that has not been solved."""


class NoShadowPrice(LPError):
    """The named constraint has no column carrying its dual value."""


class IterationLimit(LPError):
    """The pivot budget was exhausted before the simplex method terminated."""


class NodeLimitReached(LPError):
    """Branch and bound ran out of budget before finding an integral solution."""

    def __init__(self, message: str, nodes: int = 0, iterations: Optional[int] = None) -> None:
        super().__init__(message)
        self.nodes = nodes
        self.iterations = iterations


class TableauError(LPError):
    """The terminal tableau disagrees with the solution read from it."""
