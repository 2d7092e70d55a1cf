"""
State-threading API: build a model one call at a time, then maximize or
minimize it and read results from the returned SolvedModel.

    >>> s = gen_state()
    >>> s = constraint(([(6, "x1"), (4, "x2")], "<=", 8), s)
    >>> s = constraint(([(1, "x1")], "<=", 1), s)
    >>> s = constraint(([(1, "x2")], "<=", 2), s)
    >>> solved = maximize([(7, "x1"), (4, "x2")], s)
    >>> variable_value(solved, "x2")
    Fraction(1, 2)
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Any, Optional, Union

from . import model as _model
from .errors import (
    Infeasible,
    IterationLimit,
    NodeLimitReached,
    NoShadowPrice,
    NotSolved,
    Unbounded,
    UnknownConstraintName,
)
from .mip.branch_and_bound import solve_branch_and_bound
from .lp.simplex import simplex_solve
from .schemas import ConstraintModel, LPSolution, SolvedModel, SolveOptions

logger = logging.getLogger(__name__)

State = Union[ConstraintModel, SolvedModel]

integral = _model.integral


def gen_state() -> ConstraintModel:
    return _model.gen_state()


def constraint(expr: Any, state: State, name: Any = None) -> ConstraintModel:
    """Return ``state`` extended by ``expr`` (a linear constraint or ``integral(var)``)."""
    return _model.add_constraint(_model.as_model(state), expr, name=name)


def add_integral(var: Any, state: State) -> ConstraintModel:
    return _model.add_integral(_model.as_model(state), var)


def constraint_add(name: Any, terms: Any, state: State) -> ConstraintModel:
    return _model.extend_named(_model.as_model(state), name, terms)


def maximize(terms: Any, state: State, options: Optional[SolveOptions] = None) -> SolvedModel:
    return solve(_model.with_objective(_model.as_model(state), "max", terms), options)


def minimize(terms: Any, state: State, options: Optional[SolveOptions] = None) -> SolvedModel:
    return solve(_model.with_objective(_model.as_model(state), "min", terms), options)


def solve(state: State, options: Optional[SolveOptions] = None) -> SolvedModel:
    """Solve a model whose objective is already set; integrality flags trigger branch and bound."""
    model = _model.as_model(state)
    opts = options or SolveOptions()
    if model.integral:
        solution = solve_branch_and_bound(model, opts)
    else:
        solution = simplex_solve(model, opts)
    logger.info(
        "Solve finished: %s after %d pivots, %d nodes",
        solution.status,
        solution.iterations,
        solution.nodes,
    )
    return _to_solved(model, solution)


def _to_solved(model: ConstraintModel, solution: LPSolution) -> SolvedModel:
    if solution.status == "infeasible":
        raise Infeasible(solution.message or "Infeasible.")
    if solution.status == "unbounded":
        raise Unbounded(solution.message or "Unbounded.")
    if solution.status == "iteration_limit":
        raise IterationLimit(solution.message or "Iteration limit reached.")
    if solution.status == "node_limit":
        raise NodeLimitReached(solution.message, nodes=solution.nodes, iterations=solution.iterations)

    return SolvedModel(
        model=model,
        status=solution.status,
        objective_value=solution.objective_value,
        values=solution.x or {},
        duals=solution.duals,
        basis=solution.basis,
        iterations=solution.iterations,
        nodes=solution.nodes,
    )


def _require_solved(state: Any) -> SolvedModel:
    if not isinstance(state, SolvedModel):
        raise NotSolved("Model has not been solved; call maximize or minimize first.")
    return state


def objective(state: State) -> Fraction:
    return _require_solved(state).objective_value


def variable_value(state: State, var: Any) -> Fraction:
    solved = _require_solved(state)
    return solved.values.get(_model.canonical_key(var), Fraction(0))


def shadow_price(state: State, name: Any) -> Fraction:
    solved = _require_solved(state)
    key = _model.canonical_key(name)
    if solved.model.index_of(key) is None:
        raise UnknownConstraintName(key)
    if solved.duals is None:
        raise NoShadowPrice("Shadow prices were not requested; solve with return_duals=True.")
    try:
        return solved.duals[key]
    except KeyError:
        raise NoShadowPrice(f"Constraint {key!r} has no slack, surplus or artificial column.") from None
