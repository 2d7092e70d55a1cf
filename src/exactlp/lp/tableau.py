from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, List, Sequence

import numpy as np

ZERO = Fraction(0)
ONE = Fraction(1)


@dataclass
class Tableau:
    """
    Dense simplex tableau over Fractions (numpy object array).

    Rows 0..m-1 are constraints, row m is the working objective row holding
    reduced costs and, in the last column, minus the current objective value.
    Column n is the right-hand side. ``basis[i]`` is the column basic in row i;
    that column is the i-th unit vector after every pivot.
    """

    matrix: np.ndarray
    basis: List[int]
    col_labels: List[Any]
    col_types: List[str]
    variables: List[Any]
    row_names: List[Any]
    row_signs: List[int]
    row_dual_columns: List[int]
    costs: List[Fraction]
    sense: str
    phase: int = 2
    dropped_names: List[Any] = field(default_factory=list)

    @property
    def num_rows(self) -> int:
        return self.matrix.shape[0] - 1

    @property
    def num_columns(self) -> int:
        return self.matrix.shape[1] - 1

    def rhs(self, row: int) -> Fraction:
        return self.matrix[row, -1]

    def reduced_cost(self, col: int) -> Fraction:
        return self.matrix[-1, col]

    def working_value(self) -> Fraction:
        """Value of the objective currently installed in the objective row."""
        return -self.matrix[-1, -1]

    def artificial_columns(self) -> List[int]:
        return [j for j, kind in enumerate(self.col_types) if kind == "artificial"]

    def pivot(self, row: int, col: int) -> None:
        T = self.matrix
        T[row] = T[row] / T[row, col]
        for i in range(T.shape[0]):
            if i != row and T[i, col] != 0:
                T[i] = T[i] - T[row] * T[i, col]
        self.basis[row] = col

    def install_objective(self, costs: Sequence[Fraction]) -> None:
        """Write ``costs`` into the objective row, priced out against the current basis."""
        T = self.matrix
        n = self.num_columns
        objective = np.full(n + 1, ZERO, dtype=object)
        objective[:n] = list(costs)
        for row, basic in enumerate(self.basis):
            weight = costs[basic]
            if weight != 0:
                objective = objective - T[row] * weight
        T[-1] = objective

    def describe(self) -> Dict[str, Any]:
        return {
            "rows": self.num_rows,
            "columns": self.num_columns,
            "phase": self.phase,
            "basis": [self.col_labels[j] for j in self.basis],
        }
