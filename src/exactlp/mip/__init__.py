"""Integer programming on top of the exact simplex engine."""

from .branch_and_bound import solve_branch_and_bound

__all__ = ["solve_branch_and_bound"]
