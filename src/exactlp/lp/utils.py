from __future__ import annotations

from fractions import Fraction
from typing import Any, Dict, List

import numpy as np

from ..errors import Infeasible
from ..schemas import ConstraintModel
from .tableau import ONE, ZERO, Tableau

_FLIP = {"<=": ">=", ">=": "<=", "==": "=="}


def build_tableau(model: ConstraintModel) -> Tableau:
    """
    Convert a constraint model into an initial simplex tableau.

    Structural columns come first, in first-seen variable order. Each row then
    gets a slack (<=), a surplus plus an artificial (>=), or an artificial (==)
    column. Rows with a negative right-hand side are negated first. The
    objective row holds the Phase I objective (sum of artificials) when any
    artificial exists, otherwise the real objective in minimisation form.
    A model without an objective is treated as minimising zero.
    """

    col_labels: List[Any] = []
    col_types: List[str] = []
    rows: List[Dict[int, Fraction]] = []
    rhs_values: List[Fraction] = []
    basis: List[int] = []
    row_names: List[Any] = []
    row_signs: List[int] = []
    row_dual_columns: List[int] = []
    dropped_names: List[Any] = []

    def add_column(label: Any, col_type: str) -> int:
        col_labels.append(label)
        col_types.append(col_type)
        return len(col_labels) - 1

    variables = model.variables()
    col_index = {var: add_column(var, "structural") for var in variables}

    for idx, cons in enumerate(model.constraints):
        entries: Dict[int, Fraction] = {}
        for term in cons.lhs:
            if term.coef != 0:
                entries[col_index[term.var]] = term.coef
        cmp = cons.cmp
        rhs = cons.rhs
        sign = 1
        if rhs < 0:
            entries = {col: -value for col, value in entries.items()}
            rhs = -rhs
            cmp = _FLIP[cmp]
            sign = -1

        if not entries:
            holds = {"<=": rhs >= 0, ">=": rhs <= 0, "==": rhs == 0}[cmp]
            if not holds:
                label = cons.name if cons.name is not None else f"#{idx}"
                raise Infeasible(f"Constraint {label} has no variables and cannot be satisfied.")
            if cons.name is not None:
                dropped_names.append(cons.name)
            continue

        if cmp == "<=":
            slack = add_column(("slack", idx), "slack")
            entries[slack] = ONE
            basis.append(slack)
            dual_column = slack
        elif cmp == ">=":
            surplus = add_column(("surplus", idx), "surplus")
            entries[surplus] = -ONE
            artificial = add_column(("artificial", idx), "artificial")
            entries[artificial] = ONE
            basis.append(artificial)
            dual_column = surplus
        else:
            artificial = add_column(("artificial", idx), "artificial")
            entries[artificial] = ONE
            basis.append(artificial)
            dual_column = artificial

        rows.append(entries)
        rhs_values.append(rhs)
        row_names.append(cons.name)
        row_signs.append(sign)
        row_dual_columns.append(dual_column)

    m = len(rows)
    n = len(col_labels)
    matrix = np.full((m + 1, n + 1), ZERO, dtype=object)
    for r, entries in enumerate(rows):
        for col, value in entries.items():
            matrix[r, col] = value
        matrix[r, n] = rhs_values[r]

    sense = "min"
    costs = [ZERO] * n
    if model.objective is not None:
        sense = model.objective.sense
        factor = -1 if sense == "max" else 1
        for term in model.objective.terms:
            costs[col_index[term.var]] += factor * term.coef

    tableau = Tableau(
        matrix=matrix,
        basis=basis,
        col_labels=col_labels,
        col_types=col_types,
        variables=variables,
        row_names=row_names,
        row_signs=row_signs,
        row_dual_columns=row_dual_columns,
        costs=costs,
        sense=sense,
        dropped_names=dropped_names,
    )

    artificial = tableau.artificial_columns()
    if artificial:
        phase1_costs = [ZERO] * n
        for col in artificial:
            phase1_costs[col] = ONE
        tableau.install_objective(phase1_costs)
        tableau.phase = 1
    else:
        tableau.install_objective(costs)
        tableau.phase = 2
    return tableau
