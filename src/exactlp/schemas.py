from __future__ import annotations

from fractions import Fraction
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

Sense = Literal["min", "max"]
Cmp = Literal["<=", ">=", "=="]
PivotRule = Literal["dantzig", "bland"]
Status = Literal["optimal", "feasible", "infeasible", "unbounded", "iteration_limit", "node_limit"]
Number = Union[int, str, float]


class Term(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    var: Any
    coef: Fraction


class Constraint(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: Any = None
    lhs: Tuple[Term, ...] = ()
    cmp: Cmp
    rhs: Fraction

    def coefficients(self) -> Dict[Any, Fraction]:
        return {term.var: term.coef for term in self.lhs}


class Objective(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    sense: Sense
    terms: Tuple[Term, ...] = ()


class ConstraintModel(BaseModel):
    """
    Immutable set of constraints, integrality flags and (optionally) an objective.
    Every operation in exactlp.model returns a new instance; older ones stay valid.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    constraints: Tuple[Constraint, ...] = ()
    integral: Tuple[Any, ...] = ()
    objective: Optional[Objective] = None

    def variables(self) -> List[Any]:
        """Structural variables in first-seen order: constraints, objective, integrality flags."""
        seen: Dict[Any, None] = {}
        for cons in self.constraints:
            for term in cons.lhs:
                seen.setdefault(term.var, None)
        if self.objective is not None:
            for term in self.objective.terms:
                seen.setdefault(term.var, None)
        for var in self.integral:
            seen.setdefault(var, None)
        return list(seen)

    def index_of(self, name: Any) -> Optional[int]:
        if name is None:
            return None
        for idx, cons in enumerate(self.constraints):
            if cons.name == name:
                return idx
        return None

    def names(self) -> List[Any]:
        return [cons.name for cons in self.constraints if cons.name is not None]


class SolveOptions(BaseModel):
    max_iters: int = Field(default=10_000, ge=1)
    pivot_rule: PivotRule = "dantzig"
    degenerate_limit: int = Field(default=50, ge=1)
    return_duals: bool = True
    max_nodes: Optional[int] = Field(default=None, ge=1)
    max_depth: Optional[int] = Field(default=None, ge=0)
    time_limit: Optional[float] = Field(default=None, gt=0)


class LPSolution(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: Status
    objective_value: Optional[Fraction] = None
    x: Optional[Dict[Any, Fraction]] = None
    duals: Optional[Dict[Any, Fraction]] = None
    basis: Tuple[Any, ...] = ()
    iterations: int = 0
    nodes: int = 0
    message: str = ""


class SolvedModel(BaseModel):
    """A constraint model together with the optimum read from its terminal tableau."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    model: ConstraintModel
    status: Literal["optimal", "feasible"]
    objective_value: Fraction
    values: Dict[Any, Fraction]
    # None when the solve ran with return_duals=False
    duals: Optional[Dict[Any, Fraction]] = None
    basis: Tuple[Any, ...] = ()
    iterations: int = 0
    nodes: int = 0


# JSON-facing models used by the MCP server and the example files.


class LinearTerm(BaseModel):
    var: str
    coef: Number = 1


class ConstraintSpec(BaseModel):
    name: Optional[str] = None
    terms: List[LinearTerm] = Field(default_factory=list)
    cmp: Literal["<=", ">=", "==", "=", "=<"]
    rhs: Number = 0


class ProblemSpec(BaseModel):
    name: str = "problem"
    sense: Sense
    objective: List[LinearTerm] = Field(default_factory=list)
    constraints: List[ConstraintSpec] = Field(default_factory=list)
    integral: List[str] = Field(default_factory=list)

    def to_model(self) -> ConstraintModel:
        from .model import add_constraint, add_integral, gen_state, with_objective  # local import to avoid cycle

        model = gen_state()
        for cons in self.constraints:
            terms = [(term.coef, term.var) for term in cons.terms]
            model = add_constraint(model, (terms, cons.cmp, cons.rhs), name=cons.name)
        for var in self.integral:
            model = add_integral(model, var)
        objective = [(term.coef, term.var) for term in self.objective]
        return with_objective(model, self.sense, objective)
