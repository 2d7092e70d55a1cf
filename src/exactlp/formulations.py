"""
Assignment and transportation problems built on the general simplex engine.

Both constraint matrices are totally unimodular, so with integer data the LP
optimum found by the simplex method is already integral; no branching is done.

Variables are named ("x", i, j); constraints ("row", i) / ("column", j) for
assignment and ("supply", i) / ("demand", j) for transportation.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, List, Optional, Sequence

from .errors import DimensionMismatch, MismatchedTotals, TableauError
from .model import add_constraint, as_rational, gen_state, with_objective
from .schemas import ConstraintModel, SolveOptions
from .solver import solve


def assignment_model(costs: Sequence[Sequence[Any]]) -> ConstraintModel:
    """
    Build the LP for an n x n assignment problem:
      - Variables: x(i, j) >= 0, worker i does job j
      - Objective: minimize sum cost(i, j) * x(i, j)
      - Constraints: each row and each column sums to 1
    """
    n = len(costs)
    for i, row in enumerate(costs):
        if len(row) != n:
            raise DimensionMismatch(f"Cost matrix must be square; row {i} has {len(row)} entries, expected {n}.")

    model = gen_state()
    for i in range(n):
        model = add_constraint(model, ([(1, ("x", i, j)) for j in range(n)], "==", 1), name=("row", i))
    for j in range(n):
        model = add_constraint(model, ([(1, ("x", i, j)) for i in range(n)], "==", 1), name=("column", j))

    objective = [(costs[i][j], ("x", i, j)) for i in range(n) for j in range(n)]
    return with_objective(model, "min", objective)


def assignment(costs: Sequence[Sequence[Any]], options: Optional[SolveOptions] = None) -> List[List[int]]:
    """Return the 0/1 adjacency matrix of a minimum-cost assignment."""
    if len(costs) == 0:
        return []
    solved = solve(assignment_model(costs), options)
    n = len(costs)
    return [[_integral(solved.values[("x", i, j)]) for j in range(n)] for i in range(n)]


def transportation_model(
    supplies: Sequence[Any], demands: Sequence[Any], costs: Sequence[Sequence[Any]]
) -> ConstraintModel:
    supply_values = [as_rational(value) for value in supplies]
    demand_values = [as_rational(value) for value in demands]

    if len(costs) != len(supply_values):
        raise DimensionMismatch(f"Expected {len(supply_values)} cost rows (one per supply), got {len(costs)}.")
    for i, row in enumerate(costs):
        if len(row) != len(demand_values):
            raise DimensionMismatch(
                f"Cost row {i} has {len(row)} entries, expected {len(demand_values)} (one per demand)."
            )
    if sum(supply_values, Fraction(0)) != sum(demand_values, Fraction(0)):
        raise MismatchedTotals(
            f"Total supply {sum(supply_values, Fraction(0))} differs from total demand {sum(demand_values, Fraction(0))}."
        )

    rows = range(len(supply_values))
    cols = range(len(demand_values))
    model = gen_state()
    for i in rows:
        model = add_constraint(model, ([(1, ("x", i, j)) for j in cols], "==", supply_values[i]), name=("supply", i))
    for j in cols:
        model = add_constraint(model, ([(1, ("x", i, j)) for i in rows], "==", demand_values[j]), name=("demand", j))

    objective = [(costs[i][j], ("x", i, j)) for i in rows for j in cols]
    return with_objective(model, "min", objective)


def transportation(
    supplies: Sequence[Any],
    demands: Sequence[Any],
    costs: Sequence[Sequence[Any]],
    options: Optional[SolveOptions] = None,
) -> List[List[Fraction]]:
    """Return the minimum-cost transportation plan; entry (i, j) ships from supply i to demand j."""
    model = transportation_model(supplies, demands, costs)
    if not supplies or not demands:
        return [[] for _ in supplies]
    solved = solve(model, options)
    return [[solved.values[("x", i, j)] for j in range(len(demands))] for i in range(len(supplies))]


def _integral(value: Fraction) -> int:
    if value.denominator != 1:
        raise TableauError(f"Assignment relaxation returned fractional value {value}.")
    return value.numerator
