from fractions import Fraction

import pytest

from exactlp import (
    ConstraintModel,
    Infeasible,
    NotSolved,
    SolvedModel,
    Unbounded,
    constraint,
    gen_state,
    maximize,
    minimize,
    objective,
    shadow_price,
    solve,
    variable_value,
)


def make_bounded_pair():
    s = gen_state()
    s = constraint(([(6, "x1"), (4, "x2")], "<=", 8), s, name="capacity")
    s = constraint(([(1, "x1")], "<=", 1), s)
    s = constraint(([(1, "x2")], "<=", 2), s)
    return s


def test_queries_on_unsolved_model():
    s = make_bounded_pair()
    with pytest.raises(NotSolved):
        objective(s)
    with pytest.raises(NotSolved):
        variable_value(s, "x1")
    with pytest.raises(NotSolved):
        shadow_price(s, "capacity")


def test_solving_twice_gives_equal_results():
    s = make_bounded_pair()
    first = maximize([(7, "x1"), (4, "x2")], s)
    second = maximize([(7, "x1"), (4, "x2")], s)

    assert isinstance(first, SolvedModel)
    assert first == second


def test_resolving_a_solved_model_is_idempotent():
    first = maximize([(7, "x1"), (4, "x2")], make_bounded_pair())

    assert solve(first) == first
    assert maximize([(7, "x1"), (4, "x2")], first) == first


def test_forks_are_independent():
    base = make_bounded_pair()
    tight = constraint(([(1, "x2")], "<=", 0), base)

    loose_solved = maximize([(7, "x1"), (4, "x2")], base)
    tight_solved = maximize([(7, "x1"), (4, "x2")], tight)

    assert objective(loose_solved) == 9
    assert objective(tight_solved) == 7
    assert len(base.constraints) == 3


def test_unknown_variable_reads_as_zero():
    solved = maximize([(7, "x1"), (4, "x2")], make_bounded_pair())
    assert variable_value(solved, "never_used") == 0


def test_constraint_on_solved_model_starts_a_new_model():
    solved = maximize([(7, "x1"), (4, "x2")], make_bounded_pair())
    extended = constraint(([(1, "x1"), (1, "x2")], "<=", 1), solved)

    assert isinstance(extended, ConstraintModel)
    assert len(extended.constraints) == 4
    assert objective(solve(extended)) == 7


def test_minimize_after_maximize_replaces_objective():
    s = make_bounded_pair()
    maximize([(7, "x1"), (4, "x2")], s)
    solved = minimize([(1, "x1"), (1, "x2")], s)

    assert objective(solved) == 0
    assert solved.model.objective.sense == "min"


def test_infeasible_model_raises():
    s = constraint(([(1, "x")], "<=", 1), gen_state())
    s = constraint(([(1, "x")], ">=", 2), s)
    with pytest.raises(Infeasible):
        maximize([(1, "x")], s)


def test_contradictory_equalities_raise_infeasible():
    s = constraint(([(1, "x"), (1, "y")], "==", 1), gen_state())
    s = constraint(([(1, "x"), (1, "y")], "==", 2), s)
    with pytest.raises(Infeasible):
        maximize([(1, "x")], s)


def test_unbounded_model_raises():
    s = constraint(([(1, "x"), (-1, "y")], "<=", 1), gen_state())
    with pytest.raises(Unbounded):
        maximize([(1, "x"), (1, "y")], s)


def test_no_constraints_minimum_is_zero():
    solved = minimize([(3, "x")], gen_state())

    assert objective(solved) == 0
    assert variable_value(solved, "x") == Fraction(0)
