from __future__ import annotations

from typing import Any, Dict, List

from ..errors import LPError
from ..model import without_constraint
from ..schemas import ConstraintModel, SolveOptions
from .simplex import simplex_solve


def analyze_infeasibility(model: ConstraintModel) -> Dict[str, Any]:
    """Very small IIS-style heuristic: drop each constraint and re-check feasibility."""

    options = SolveOptions(return_duals=False)
    # feasibility only; an unbounded objective must not hide a feasible relaxation
    feasibility = model.model_copy(update={"objective": None})

    try:
        base_solution = simplex_solve(feasibility, options)
    except LPError as exc:
        return {
            "status": "error",
            "message": str(exc),
            "conflicting_constraints": [],
            "suggestions": [],
        }

    if base_solution.status != "infeasible":
        return {
            "status": base_solution.status,
            "message": base_solution.message or "Model is not infeasible.",
            "conflicting_constraints": [],
            "suggestions": [],
        }

    conflicts: List[Any] = []
    for idx, cons in enumerate(model.constraints):
        relaxed = without_constraint(feasibility, idx)
        if simplex_solve(relaxed, options).status != "infeasible":
            conflicts.append(cons.name if cons.name is not None else idx)

    suggestions = []
    if conflicts:
        suggestions.append("Relax or inspect the conflicting constraints above.")
    else:
        suggestions.append("Several constraints conflict jointly; consider relaxing groups of them.")

    return {
        "status": "infeasible",
        "message": "Detected infeasibility; listed constraints whose removal restores feasibility.",
        "conflicting_constraints": conflicts,
        "suggestions": suggestions,
    }
