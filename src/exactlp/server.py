from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from .errors import LPError
from .formulations import assignment, transportation
from .lp.diagnostics import analyze_infeasibility
from .lp.parser import parse_problem
from .model import format_rational, variable_order_key
from .schemas import Number, ProblemSpec, SolvedModel, SolveOptions
from .solver import solve

logger = logging.getLogger(__name__)

app = FastMCP("Exact LP")


def solved_to_dict(solved: SolvedModel) -> Dict[str, Any]:
    ordered = sorted(solved.values.items(), key=lambda item: variable_order_key(item[0]))
    return {
        "status": solved.status,
        "objective_value": format_rational(solved.objective_value),
        "x": {str(var): format_rational(value) for var, value in ordered},
        "shadow_prices": {str(name): format_rational(value) for name, value in (solved.duals or {}).items()},
        "iterations": solved.iterations,
        "nodes": solved.nodes,
    }


def _error(exc: LPError) -> Dict[str, Any]:
    return {"status": type(exc).__name__, "message": str(exc)}


@app.tool()
def solve_linear_program(problem: ProblemSpec, options: SolveOptions | None = None) -> dict:
    """Solve an LP or ILP exactly and return values as 'p/q' strings."""
    try:
        return solved_to_dict(solve(problem.to_model(), options))
    except LPError as exc:
        logger.info("solve_linear_program failed: %s", exc)
        return _error(exc)


@app.tool()
def parse_problem_text(spec: str, options: SolveOptions | None = None) -> dict:
    """Parse a compact text problem ('maximize 3x + 2y subject to ...') and solve it."""
    try:
        return solved_to_dict(solve(parse_problem(spec), options))
    except LPError as exc:
        return _error(exc)


@app.tool()
def solve_assignment(costs: List[List[Number]]) -> dict:
    """Minimum-cost assignment for a square cost matrix; returns a 0/1 matrix."""
    try:
        return {"status": "optimal", "assignment": assignment(costs)}
    except LPError as exc:
        return _error(exc)


@app.tool()
def solve_transportation(supplies: List[Number], demands: List[Number], costs: List[List[Number]]) -> dict:
    """Minimum-cost transportation plan for balanced supplies and demands."""
    try:
        plan = transportation(supplies, demands, costs)
    except LPError as exc:
        return _error(exc)
    return {"status": "optimal", "plan": [[format_rational(value) for value in row] for row in plan]}


@app.tool()
def diagnose_infeasibility(problem: ProblemSpec) -> dict:
    """Return heuristic infeasibility analysis (constraints whose removal restores feasibility)."""
    try:
        report = analyze_infeasibility(problem.to_model())
    except LPError as exc:
        return _error(exc)
    report["conflicting_constraints"] = [str(name) for name in report["conflicting_constraints"]]
    return report


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=os.environ.get("EXACTLP_LOG_LEVEL", "WARNING").upper())

    transport = os.environ.get("EXACTLP_TRANSPORT", "stdio")
    if transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        app.settings.host = "0.0.0.0"
        app.settings.port = int(os.environ.get("PORT", "8081"))
        app.settings.streamable_http_path = "/mcp"
        app.run(transport="streamable-http")
