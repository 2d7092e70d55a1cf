from fractions import Fraction

import pytest

from exactlp import ConstraintSyntaxError, objective, solve, variable_value
from exactlp.lp.parser import parse_constraint, parse_linear_expr, parse_problem


def test_parser_outputs_expected_constraints():
    spec = "maximize 3x + 2y subject to x + 2y <= 14, 3x - y >= 0, x <= 5, x,y >= 0"
    model = parse_problem(spec)

    assert model.variables() == ["x", "y"]
    assert model.objective.sense == "max"
    # "x, y >= 0" is implied by non-negativity and adds nothing
    assert len(model.constraints) == 3
    assert [c.cmp for c in model.constraints] == ["<=", ">=", "<="]


def test_parsed_problem_solves_exactly():
    solved = solve(parse_problem("maximize 3x + 2y subject to x + 2y <= 14, 3x - y >= 0, x <= 5, x,y >= 0"))

    assert variable_value(solved, "x") == 5
    assert variable_value(solved, "y") == Fraction(9, 2)
    assert objective(solved) == 24


def test_integer_clause_sets_integrality():
    spec = "maximize 7x1 + 4x2 subject to 6x1 + 4x2 <= 8, x1 <= 1, x2 <= 2; integer x1, x2"
    model = parse_problem(spec)

    assert model.integral == ("x1", "x2")
    solved = solve(model)
    assert variable_value(solved, "x1") == 0
    assert variable_value(solved, "x2") == 2


def test_parse_constraint_moves_constants_and_terms():
    cons = parse_constraint("3x + 2/5 y - 4 <= 14 + y")

    assert cons.coefficients() == {"x": Fraction(3), "y": Fraction(-3, 5)}
    assert cons.cmp == "<="
    assert cons.rhs == 18


def test_decimals_are_read_exactly():
    terms, constant = parse_linear_expr("0.1x + 0.2 y + 0.3")

    assert [(t.var, t.coef) for t in terms] == [("x", Fraction(1, 10)), ("y", Fraction(1, 5))]
    assert constant == Fraction(3, 10)


def test_alternative_relation_spellings():
    assert parse_constraint("x =< 3").cmp == "<="
    assert parse_constraint("x + y = 3").cmp == "=="
    assert parse_constraint("x + y == 3").cmp == "=="


@pytest.mark.parametrize(
    "text",
    [
        "x + y",
        "x <= ",
        "1 <= x <= 3",
        "x + $ <= 3",
    ],
)
def test_malformed_constraints(text):
    with pytest.raises(ConstraintSyntaxError):
        parse_constraint(text)


@pytest.mark.parametrize(
    "spec",
    [
        "",
        "find x subject to x <= 1",
        "maximize subject to x <= 1",
        "maximize x + 3 subject to x <= 1",
        "maximize x subject to x <= 1, y",
    ],
)
def test_malformed_problems(spec):
    with pytest.raises(ConstraintSyntaxError):
        parse_problem(spec)


def test_syntax_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_constraint("no relation here")
