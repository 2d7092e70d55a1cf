from __future__ import annotations

import logging
import math
import time
from fractions import Fraction
from typing import Any, Dict, List, Optional, Tuple

from ..lp.simplex import simplex_solve
from ..model import add_constraint
from ..schemas import ConstraintModel, LPSolution, SolveOptions

logger = logging.getLogger(__name__)


def solve_branch_and_bound(model: ConstraintModel, opts: Optional[SolveOptions] = None) -> LPSolution:
    """
    Depth-first branch and bound over the integrality flags of ``model``:
      - solve the LP relaxation of a node
      - prune it if infeasible or if it cannot beat the incumbent
      - otherwise branch on the first fractional flagged variable with
        x <= floor(v) (explored first) and x >= ceil(v)
    Budgets in ``opts`` are checked between nodes only, never mid-pivot.
    """

    opts = opts or SolveOptions()
    if not model.integral:
        return simplex_solve(model, opts)

    sense_factor = 1 if model.objective is None or model.objective.sense == "max" else -1
    integral = set(model.integral)
    flagged = [var for var in model.variables() if var in integral]
    started = time.monotonic()

    incumbent: Optional[LPSolution] = None
    stack: List[Tuple[ConstraintModel, int]] = [(model, 0)]
    explored = 0
    total_iterations = 0
    truncated = False

    while stack:
        if _budget_exhausted(opts, explored, started):
            truncated = True
            break

        current, depth = stack.pop()
        lp_solution = simplex_solve(current, opts)
        total_iterations += lp_solution.iterations
        explored += 1

        if lp_solution.status == "infeasible":
            continue
        if lp_solution.status in {"unbounded", "iteration_limit"}:
            logger.info("Relaxation at depth %d is %s; aborting search", depth, lp_solution.status)
            return lp_solution.model_copy(
                update={"iterations": total_iterations, "nodes": explored}
            )

        value = lp_solution.objective_value
        if incumbent is not None and sense_factor * value <= sense_factor * incumbent.objective_value:
            logger.debug("Pruned node at depth %d: bound %s does not beat %s", depth, value, incumbent.objective_value)
            continue

        fractional = _find_fractional(flagged, lp_solution.x or {})
        if fractional is None:
            logger.debug("New incumbent %s at depth %d", value, depth)
            incumbent = lp_solution
            continue

        if opts.max_depth is not None and depth >= opts.max_depth:
            truncated = True
            continue

        var, frac_value = fractional
        lower_branch = add_constraint(current, ([(1, var)], "<=", math.floor(frac_value)))
        upper_branch = add_constraint(current, ([(1, var)], ">=", math.ceil(frac_value)))
        logger.debug("Branching on %r = %s at depth %d", var, frac_value, depth)

        stack.append((upper_branch, depth + 1))
        stack.append((lower_branch, depth + 1))

    logger.info("Branch and bound explored %d nodes (%d pivots)", explored, total_iterations)

    if incumbent is None:
        if truncated:
            return LPSolution(
                status="node_limit",
                iterations=total_iterations,
                nodes=explored,
                message="Reached branch limit before finding a feasible integer solution.",
            )
        return LPSolution(
            status="infeasible",
            iterations=total_iterations,
            nodes=explored,
            message="No feasible integer assignment found.",
        )

    if truncated:
        logger.warning("Search budget exhausted; returning unproven incumbent %s", incumbent.objective_value)
    return incumbent.model_copy(
        update={
            "status": "feasible" if truncated else "optimal",
            "iterations": total_iterations,
            "nodes": explored,
            "message": f"Explored nodes: {explored}",
        }
    )


def _find_fractional(flagged: List[Any], values: Dict[Any, Fraction]) -> Optional[Tuple[Any, Fraction]]:
    for var in flagged:
        value = values.get(var, Fraction(0))
        if value.denominator != 1:
            return var, value
    return None


def _budget_exhausted(opts: SolveOptions, explored: int, started: float) -> bool:
    if opts.max_nodes is not None and explored >= opts.max_nodes:
        return True
    if opts.time_limit is not None and time.monotonic() - started >= opts.time_limit:
        return True
    return False
