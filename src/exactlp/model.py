"""
Persistent operations on ConstraintModel.

Every function returns a fresh model and leaves its argument untouched, so a
model can be forked freely (branch and bound relies on this). All numbers are
converted to Fraction on the way in.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict, Iterable, NamedTuple, Tuple

from .errors import ConstraintSyntaxError, DuplicateName, UnknownConstraintName
from .schemas import Constraint, ConstraintModel, Objective, SolvedModel, Term

_RELATIONS = {
    "<=": "<=",
    "=<": "<=",
    ">=": ">=",
    "==": "==",
    "=": "==",
}


class Integral(NamedTuple):
    """Marker accepted by add_constraint: flag ``var`` as integer-valued."""

    var: Any


def integral(var: Any) -> Integral:
    return Integral(canonical_key(var))


def as_rational(value: Any) -> Fraction:
    if isinstance(value, bool):
        raise ConstraintSyntaxError(f"Boolean {value!r} is not a coefficient.")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ConstraintSyntaxError(f"Number {value!r} is not finite.")
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ConstraintSyntaxError(f"Number {value!r} is not finite.")
        # shortest repr, so 0.3 becomes 3/10 rather than its binary expansion
        return Fraction(repr(value))
    if isinstance(value, str):
        try:
            return Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as exc:
            raise ConstraintSyntaxError(f"'{value}' is not a rational number.") from exc
    if isinstance(value, numbers.Rational):
        return Fraction(value.numerator, value.denominator)
    raise ConstraintSyntaxError(f"{value!r} is not a number.")


def format_rational(value: Fraction) -> str:
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def canonical_key(value: Any) -> Any:
    """Hashable identity for a variable or constraint name; lists become tuples."""
    if value is None:
        raise ConstraintSyntaxError("None cannot identify a variable or constraint.")
    if isinstance(value, (list, tuple)):
        return tuple(canonical_key(item) for item in value)
    try:
        hash(value)
    except TypeError as exc:
        raise ConstraintSyntaxError(f"{value!r} is not hashable.") from exc
    return value


def variable_order_key(value: Any) -> Tuple[Any, ...]:
    """Total order over identifiers: numbers < strings < tuples (by arity, then items)."""
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    if isinstance(value, tuple):
        return (2, len(value), tuple(variable_order_key(item) for item in value))
    return (3, type(value).__name__, repr(value))


def normalize_relation(cmp: Any) -> str:
    try:
        return _RELATIONS[str(cmp).strip()]
    except KeyError:
        raise ConstraintSyntaxError(f"Unknown relation '{cmp}'; expected <=, >= or ==.") from None


def merge_terms(terms: Iterable[Term]) -> Tuple[Term, ...]:
    coeffs: Dict[Any, Fraction] = {}
    for term in terms:
        coeffs[term.var] = coeffs.get(term.var, Fraction(0)) + term.coef
    return tuple(Term(var=var, coef=coef) for var, coef in coeffs.items())


def normalize_terms(terms: Any) -> Tuple[Term, ...]:
    """
    Accepts a mapping ``var -> coef``, a sequence of ``(coef, var)`` pairs, or
    Term instances. Duplicate variables are summed, first-seen order is kept.
    """
    if isinstance(terms, str):
        raise ConstraintSyntaxError("Expected coefficient/variable terms, got a string.")
    if isinstance(terms, Mapping):
        pairs = [(coef, var) for var, coef in terms.items()]
    else:
        try:
            pairs = list(terms)
        except TypeError as exc:
            raise ConstraintSyntaxError(f"{terms!r} is not a sequence of terms.") from exc

    parsed = []
    for item in pairs:
        if isinstance(item, Term):
            parsed.append(item)
            continue
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise ConstraintSyntaxError(f"Term {item!r} is not a (coefficient, variable) pair.")
        coef, var = item
        parsed.append(Term(var=canonical_key(var), coef=as_rational(coef)))
    return merge_terms(parsed)


def make_constraint(expr: Any, name: Any = None) -> Constraint:
    if isinstance(expr, Constraint):
        constraint = expr
    elif isinstance(expr, str):
        from .lp.parser import parse_constraint  # local import to avoid cycle

        constraint = parse_constraint(expr)
    elif isinstance(expr, (tuple, list)) and len(expr) == 3:
        terms, cmp, rhs = expr
        constraint = Constraint(
            lhs=normalize_terms(terms),
            cmp=normalize_relation(cmp),  # type: ignore[arg-type]
            rhs=as_rational(rhs),
        )
    else:
        raise ConstraintSyntaxError(f"Cannot interpret {expr!r} as a linear constraint.")

    if name is not None:
        constraint = constraint.model_copy(update={"name": canonical_key(name)})
    return constraint


def gen_state() -> ConstraintModel:
    return ConstraintModel()


def as_model(state: Any) -> ConstraintModel:
    if isinstance(state, SolvedModel):
        return state.model
    if isinstance(state, ConstraintModel):
        return state
    raise TypeError(f"Expected a ConstraintModel or SolvedModel, got {type(state).__name__}.")


def add_constraint(model: ConstraintModel, expr: Any, name: Any = None) -> ConstraintModel:
    if isinstance(expr, Integral):
        return add_integral(model, expr.var)
    constraint = make_constraint(expr, name)
    if constraint.name is not None and model.index_of(constraint.name) is not None:
        raise DuplicateName(constraint.name)
    return model.model_copy(update={"constraints": model.constraints + (constraint,)})


def add_integral(model: ConstraintModel, var: Any) -> ConstraintModel:
    key = canonical_key(var)
    if key in model.integral:
        return model
    return model.model_copy(update={"integral": model.integral + (key,)})


def extend_named(model: ConstraintModel, name: Any, terms: Any) -> ConstraintModel:
    """Add ``terms`` to the left-hand side of the constraint called ``name``."""
    key = canonical_key(name)
    idx = model.index_of(key)
    if idx is None:
        raise UnknownConstraintName(key)
    current = model.constraints[idx]
    extended = current.model_copy(update={"lhs": merge_terms(current.lhs + normalize_terms(terms))})
    constraints = model.constraints[:idx] + (extended,) + model.constraints[idx + 1 :]
    return model.model_copy(update={"constraints": constraints})


def with_objective(model: ConstraintModel, sense: str, terms: Any) -> ConstraintModel:
    objective = Objective(sense=sense, terms=normalize_terms(terms))  # type: ignore[arg-type]
    return model.model_copy(update={"objective": objective})


def without_constraint(model: ConstraintModel, idx: int) -> ConstraintModel:
    constraints = model.constraints[:idx] + model.constraints[idx + 1 :]
    return model.model_copy(update={"constraints": constraints})
