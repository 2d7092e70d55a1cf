"""Exact rational linear programming: tableau construction, two-phase simplex, solution reading."""

from .simplex import simplex_solve
from .parser import parse_constraint, parse_problem
from .diagnostics import analyze_infeasibility

__all__ = ["simplex_solve", "parse_constraint", "parse_problem", "analyze_infeasibility"]
