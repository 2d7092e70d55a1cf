"""exactlp: linear and integer programming over exact rationals."""

from .errors import (
    ConstraintSyntaxError,
    DimensionMismatch,
    DuplicateName,
    Infeasible,
    IterationLimit,
    LPError,
    MismatchedTotals,
    NodeLimitReached,
    NoShadowPrice,
    NotSolved,
    TableauError,
    Unbounded,
    UnknownConstraintName,
)
from .formulations import assignment, assignment_model, transportation, transportation_model
from .schemas import ConstraintModel, SolvedModel, SolveOptions
from .solver import (
    add_integral,
    constraint,
    constraint_add,
    gen_state,
    integral,
    maximize,
    minimize,
    objective,
    shadow_price,
    solve,
    variable_value,
)

__all__ = [
    "ConstraintModel",
    "SolvedModel",
    "SolveOptions",
    "gen_state",
    "constraint",
    "integral",
    "add_integral",
    "constraint_add",
    "maximize",
    "minimize",
    "solve",
    "objective",
    "variable_value",
    "shadow_price",
    "assignment",
    "assignment_model",
    "transportation",
    "transportation_model",
    "LPError",
    "ConstraintSyntaxError",
    "UnknownConstraintName",
    "DuplicateName",
    "Infeasible",
    "Unbounded",
    "MismatchedTotals",
    "DimensionMismatch",
    "NotSolved",
    "NoShadowPrice",
    "IterationLimit",
    "NodeLimitReached",
    "TableauError",
]
