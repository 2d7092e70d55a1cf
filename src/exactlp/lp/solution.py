"""Read variable values, objective and shadow prices off a terminal tableau."""

from __future__ import annotations

from fractions import Fraction
from typing import Any, Dict

from ..errors import TableauError
from ..schemas import ConstraintModel, LPSolution, SolveOptions
from .tableau import ZERO, Tableau


def variable_values(tableau: Tableau) -> Dict[Any, Fraction]:
    """Every structural variable, in column order; non-basic ones sit at zero."""
    values = {var: ZERO for var in tableau.variables}
    for row, col in enumerate(tableau.basis):
        if tableau.col_types[col] == "structural":
            values[tableau.col_labels[col]] = tableau.rhs(row)
    return values


def objective_value(tableau: Tableau) -> Fraction:
    value = tableau.working_value()
    return -value if tableau.sense == "max" else value


def shadow_prices(tableau: Tableau) -> Dict[Any, Fraction]:
    """
    d(optimum)/d(rhs) for every named row, read from the objective-row entry
    under the row's slack, surplus or (for equalities) artificial column.
    """
    direction = -1 if tableau.sense == "max" else 1
    prices: Dict[Any, Fraction] = {}
    for row, name in enumerate(tableau.row_names):
        if name is None:
            continue
        col = tableau.row_dual_columns[row]
        reduced = tableau.reduced_cost(col)
        dual = reduced if tableau.col_types[col] == "surplus" else -reduced
        prices[name] = direction * tableau.row_signs[row] * dual
    return prices


def extract_solution(
    tableau: Tableau, model: ConstraintModel, opts: SolveOptions, iterations: int
) -> LPSolution:
    values = variable_values(tableau)
    value = objective_value(tableau)

    if model.objective is not None:
        recomputed = sum((term.coef * values[term.var] for term in model.objective.terms), ZERO)
        if recomputed != value:
            raise TableauError(
                f"Objective row reports {value} but the basic solution evaluates to {recomputed}."
            )

    return LPSolution(
        status="optimal",
        objective_value=value,
        x=values,
        duals=shadow_prices(tableau) if opts.return_duals else None,
        basis=tuple(tableau.col_labels[col] for col in tableau.basis),
        iterations=iterations,
    )
