import re
from collections import OrderedDict
from fractions import Fraction
from typing import List, Tuple

from ..errors import ConstraintSyntaxError
from ..model import (
    add_constraint,
    add_integral,
    as_rational,
    gen_state,
    normalize_relation,
    with_objective,
)
from ..schemas import Constraint, ConstraintModel, Term

_TOKEN_SPLIT = re.compile(r",(?![^()]*\))|;|\band\b", re.IGNORECASE)
_COMPARATOR = re.compile(r"(<=|=<|>=|==|=)")
_SIMPLE_BOUND = re.compile(
    r"^([A-Za-z_]\w*)\s*(<=|=<|>=)\s*([+-]?\d+(?:\.\d+)?(?:/\d+)?)$"
)
_NAME = re.compile(r"[A-Za-z_]\w*")
_INTEGER_CLAUSE = re.compile(r"^(?:integer|integral|int)\s+(.+)$", re.IGNORECASE)
_NUMBER = r"\d+(?:\.\d+)?(?:/\d+)?|\.\d+"
_TERM_PATTERN = re.compile(rf"([+-])?\s*({_NUMBER})?\s*\*?\s*([A-Za-z_]\w*)")
_CONSTANT_PATTERN = re.compile(rf"([+-])?\s*({_NUMBER})")


def parse_problem(spec: str) -> ConstraintModel:
    """
    Small rule-based parser for specs like:
      "maximize 7x1 + 4x2 subject to 6x1 + 4x2 <= 8, x1 <= 1, x2 <= 2; integer x1, x2"
    Coefficients may be decimals or fractions ("3/10 x"); all are read exactly.
    """

    if not spec or not spec.strip():
        raise ConstraintSyntaxError("Problem text is empty.")

    normalized = " ".join(spec.replace("\n", " ").split())
    pieces = re.split(r"subject to|such that|s\.t\.", normalized, flags=re.IGNORECASE)
    objective_part = pieces[0].strip()
    constraints_part = pieces[1].strip() if len(pieces) > 1 else ""

    match = re.match(r"(maximize|minimize|max|min)\b\s*(.*)", objective_part, flags=re.IGNORECASE)
    if not match:
        raise ConstraintSyntaxError("Objective must start with 'maximize' or 'minimize'.")
    sense = "max" if match.group(1).lower().startswith("max") else "min"
    objective_expr_str = match.group(2).strip()
    if not objective_expr_str:
        raise ConstraintSyntaxError("Objective expression is missing.")

    objective_terms, constant = parse_linear_expr(objective_expr_str)
    if constant != 0:
        raise ConstraintSyntaxError("Objective constants are not supported.")

    model = gen_state()
    integer_vars: List[str] = []
    tokens = [tok.strip() for tok in _TOKEN_SPLIT.split(constraints_part) if tok.strip()]

    # "x, y >= 0" and "integer x, y" arrive split on their commas
    pending: List[str] = []
    in_integer_clause = False
    for token in tokens:
        if _NAME.fullmatch(token):
            if in_integer_clause:
                integer_vars.append(token)
            else:
                pending.append(token)
            continue
        in_integer_clause = False

        integer_clause = _INTEGER_CLAUSE.match(token)
        if integer_clause:
            if pending:
                raise ConstraintSyntaxError(f"Dangling variable names: {', '.join(pending)}.")
            integer_vars.append(integer_clause.group(1).strip())
            in_integer_clause = True
            continue

        bound = _SIMPLE_BOUND.match(token)
        if bound:
            var_name, cmp, rhs_text = bound.groups()
            rhs_value = as_rational(rhs_text)
            for name in pending + [var_name]:
                if normalize_relation(cmp) == ">=" and rhs_value == 0:
                    continue  # implied by the non-negativity of every variable
                model = add_constraint(model, ([(1, name)], cmp, rhs_value))
            pending = []
            continue

        if pending:
            raise ConstraintSyntaxError(f"Dangling variable names: {', '.join(pending)}.")
        model = add_constraint(model, parse_constraint(token))

    if pending:
        raise ConstraintSyntaxError(f"Dangling variable names: {', '.join(pending)}.")

    for var_name in integer_vars:
        if not _NAME.fullmatch(var_name):
            raise ConstraintSyntaxError(f"'{var_name}' is not a variable name.")
        model = add_integral(model, var_name)

    return with_objective(model, sense, objective_terms)


def parse_constraint(text: str) -> Constraint:
    """Parse ``"3x + 2/5 y - 4 <= 14"`` into a normalized constraint (constants move right)."""
    comp_match = _COMPARATOR.search(text)
    if not comp_match:
        raise ConstraintSyntaxError(f"Could not parse constraint segment '{text}'.")
    lhs_str = text[: comp_match.start()].strip()
    rhs_str = text[comp_match.end() :].strip()
    if not lhs_str or not rhs_str:
        raise ConstraintSyntaxError(f"Incomplete constraint expression '{text}'.")
    if _COMPARATOR.search(rhs_str):
        raise ConstraintSyntaxError(f"Chained comparisons are not supported: '{text}'.")

    lhs_terms, lhs_constant = parse_linear_expr(lhs_str)
    rhs_terms, rhs_constant = parse_linear_expr(rhs_str)

    coeffs: "OrderedDict[str, Fraction]" = OrderedDict()
    for term in lhs_terms:
        coeffs[term.var] = coeffs.get(term.var, Fraction(0)) + term.coef
    for term in rhs_terms:
        coeffs[term.var] = coeffs.get(term.var, Fraction(0)) - term.coef

    return Constraint(
        lhs=tuple(Term(var=var, coef=coef) for var, coef in coeffs.items()),
        cmp=normalize_relation(comp_match.group(1)),  # type: ignore[arg-type]
        rhs=rhs_constant - lhs_constant,
    )


def parse_linear_expr(expr_str: str) -> Tuple[List[Term], Fraction]:
    coeffs: "OrderedDict[str, Fraction]" = OrderedDict()
    spans: List[Tuple[int, int]] = []

    for match in _TERM_PATTERN.finditer(expr_str):
        sign, coef_text, var_name = match.groups()
        coef = as_rational(coef_text) if coef_text else Fraction(1)
        if sign == "-":
            coef = -coef
        coeffs[var_name] = coeffs.get(var_name, Fraction(0)) + coef
        spans.append(match.span())

    remaining = list(expr_str)
    for start, end in spans:
        for idx in range(start, end):
            remaining[idx] = " "
    remaining_str = "".join(remaining)

    constant = Fraction(0)
    for num_match in _CONSTANT_PATTERN.finditer(remaining_str):
        sign, text = num_match.groups()
        value = as_rational(text)
        constant += -value if sign == "-" else value
    leftover = _CONSTANT_PATTERN.sub(" ", remaining_str).strip()
    if leftover:
        raise ConstraintSyntaxError(f"Unexpected text '{leftover}' in expression '{expr_str}'.")

    terms = [Term(var=name, coef=coef) for name, coef in coeffs.items()]
    return terms, constant
