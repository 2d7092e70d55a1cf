from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Set

from ..errors import Infeasible
from ..schemas import ConstraintModel, LPSolution, SolveOptions
from .solution import extract_solution
from .tableau import Tableau
from .utils import build_tableau

logger = logging.getLogger(__name__)


def simplex_solve(model: ConstraintModel, opts: Optional[SolveOptions] = None) -> LPSolution:
    """
    Two-phase primal simplex over exact rationals.

    Dantzig entering rule with lowest-index tie-breaks, ratio test broken by
    lowest basic column index, and a switch to Bland's rule after a run of
    degenerate pivots. No tolerances: every comparison is exact.
    """

    opts = opts or SolveOptions()
    try:
        tableau = build_tableau(model)
    except Infeasible as exc:
        return LPSolution(status="infeasible", message=str(exc))

    result = solve_tableau(tableau, opts)
    status = result["status"]
    iterations = result["iterations"]

    if status == "infeasible":
        return LPSolution(status="infeasible", iterations=iterations, message="Infeasible.")
    if status == "unbounded":
        return LPSolution(
            status="unbounded",
            iterations=iterations,
            message=f"Objective unbounded along column {tableau.col_labels[result['column']]!r}.",
        )
    if status == "iteration_limit":
        return LPSolution(
            status="iteration_limit",
            iterations=iterations,
            message=f"Hit iteration limit in Phase {result['phase']}.",
        )

    return extract_solution(tableau, model, opts, iterations)


def solve_tableau(tableau: Tableau, opts: SolveOptions) -> Dict[str, Any]:
    """Run both phases in place on ``tableau``; the terminal tableau is left canonical."""
    iterations = 0

    if tableau.phase == 1:
        phase1 = _phase_I(tableau, opts)
        iterations += phase1["iterations"]
        if phase1["status"] != "feasible":
            return {**phase1, "iterations": iterations}

    remaining = max(opts.max_iters - iterations, 1)
    phase2 = _phase_II(tableau, opts, remaining)
    iterations += phase2["iterations"]
    return {**phase2, "iterations": iterations}


def _phase_I(tableau: Tableau, opts: SolveOptions) -> Dict[str, Any]:
    result = _run_simplex(tableau, opts, max_iterations=opts.max_iters, forbidden=None)
    if result["status"] == "iteration_limit":
        return {**result, "phase": 1}

    # minimising a sum of non-negative artificials cannot be unbounded
    residual = tableau.working_value()
    if residual > 0:
        logger.debug("Phase I ended with artificial sum %s; infeasible", residual)
        return {"status": "infeasible", "iterations": result["iterations"], "phase": 1}

    _drive_out_artificials(tableau)
    tableau.install_objective(tableau.costs)
    tableau.phase = 2
    logger.debug("Phase I feasible after %d pivots", result["iterations"])
    return {"status": "feasible", "iterations": result["iterations"], "phase": 1}


def _phase_II(tableau: Tableau, opts: SolveOptions, max_iterations: int) -> Dict[str, Any]:
    forbidden = set(tableau.artificial_columns())
    result = _run_simplex(tableau, opts, max_iterations=max_iterations, forbidden=forbidden)
    logger.debug("Phase II stopped: %s", tableau.describe())
    return {**result, "phase": 2}


def _drive_out_artificials(tableau: Tableau) -> None:
    """Pivot zero-level artificials out of the basis; rows where that is impossible are redundant."""
    artificial = set(tableau.artificial_columns())
    T = tableau.matrix
    for row, basic in enumerate(tableau.basis):
        if basic not in artificial:
            continue
        for col in range(tableau.num_columns):
            if col not in artificial and T[row, col] != 0:
                tableau.pivot(row, col)
                break
        else:
            logger.debug("Row %d is redundant; artificial %r stays basic at zero", row, tableau.col_labels[basic])


def _run_simplex(
    tableau: Tableau,
    opts: SolveOptions,
    max_iterations: int,
    forbidden: Optional[Set[int]],
) -> Dict[str, Any]:
    forbidden = set() if forbidden is None else forbidden
    use_bland = opts.pivot_rule == "bland"
    degenerate_run = 0
    iterations = 0

    while True:
        entering = _select_entering(tableau, forbidden, use_bland)
        if entering is None:
            return {"status": "optimal", "iterations": iterations}

        if iterations >= max_iterations:
            return {"status": "iteration_limit", "iterations": iterations}

        leaving = _select_leaving(tableau, entering)
        if leaving is None:
            return {"status": "unbounded", "iterations": iterations, "column": entering}

        degenerate = tableau.rhs(leaving) == 0
        logger.debug(
            "Pivot %d: %r enters, %r leaves (row %d)",
            iterations + 1,
            tableau.col_labels[entering],
            tableau.col_labels[tableau.basis[leaving]],
            leaving,
        )
        tableau.pivot(leaving, entering)
        iterations += 1

        if not degenerate:
            degenerate_run = 0
            continue
        degenerate_run += 1
        if not use_bland and degenerate_run >= opts.degenerate_limit:
            logger.warning(
                "%d consecutive degenerate pivots; switching to Bland's rule", degenerate_run
            )
            use_bland = True


def _select_entering(tableau: Tableau, forbidden: Set[int], use_bland: bool) -> Optional[int]:
    basic = set(tableau.basis)
    best: Optional[int] = None
    best_cost = 0
    for col in range(tableau.num_columns):
        if col in forbidden or col in basic:
            continue
        cost = tableau.reduced_cost(col)
        if cost < 0:
            if use_bland:
                return col
            if cost < best_cost:
                best, best_cost = col, cost
    return best


def _select_leaving(tableau: Tableau, entering: int) -> Optional[int]:
    T = tableau.matrix
    best_row: Optional[int] = None
    best_key = None
    for row in range(tableau.num_rows):
        entry = T[row, entering]
        if entry > 0:
            key = (T[row, -1] / entry, tableau.basis[row])
            if best_key is None or key < best_key:
                best_row, best_key = row, key
    return best_row
