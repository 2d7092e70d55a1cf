import json
from pathlib import Path

import pytest

from exactlp import (
    Infeasible,
    NodeLimitReached,
    SolveOptions,
    Unbounded,
    constraint,
    gen_state,
    integral,
    maximize,
    objective,
    solve,
    variable_value,
)
from exactlp.mip.branch_and_bound import solve_branch_and_bound
from exactlp.schemas import ProblemSpec


def make_basic_mip():
    s = gen_state()
    s = constraint(([(1, "x")], "<=", 1), s)
    s = constraint(([(1, "y")], "<=", 1), s)
    s = constraint(([(1, "x"), (1, "y")], "<=", 1), s, name="limit")
    s = constraint(integral("x"), s)
    s = constraint(integral("y"), s)
    return s


def make_bounded_pair():
    s = gen_state()
    s = constraint(([(6, ("x", 1)), (4, ("x", 2))], "<=", 8), s)
    s = constraint(([(1, ("x", 1))], "<=", 1), s)
    s = constraint(([(1, ("x", 2))], "<=", 2), s)
    return s


def make_knapsack():
    s = gen_state()
    s = constraint(([(4, "a"), (6, "b"), (3, "c")], "<=", 10), s, name="weight")
    for item in ("a", "b", "c"):
        s = constraint(([(1, item)], "<=", 1), s)
        s = constraint(integral(item), s)
    return s


KNAPSACK_VALUES = [(10, "a"), (13, "b"), (7, "c")]


def test_branch_and_bound_finds_integer_solution():
    solved = maximize([(1, "x"), (1, "y")], make_basic_mip())

    assert solved.status == "optimal"
    assert variable_value(solved, "x") + variable_value(solved, "y") == 1
    for var in ("x", "y"):
        assert variable_value(solved, var).denominator == 1


def test_integral_optimum_differs_from_rounded_relaxation():
    s = make_bounded_pair()
    s = constraint(integral(("x", 1)), s)
    s = constraint(integral(("x", 2)), s)
    solved = maximize([(7, ("x", 1)), (4, ("x", 2))], s)

    assert variable_value(solved, ("x", 1)) == 0
    assert variable_value(solved, ("x", 2)) == 2
    assert objective(solved) == 8


def test_coin_change():
    s = gen_state()
    s = constraint(([(1, ("c", 1)), (5, ("c", 5)), (20, ("c", 20))], "==", 111), s)
    s = constraint(([(1, ("c", 1))], "<=", 3), s)
    s = constraint(([(1, ("c", 5))], "<=", 20), s)
    s = constraint(([(1, ("c", 20))], "<=", 10), s)
    for coin in (1, 5, 20):
        s = constraint(integral(("c", coin)), s)
    solved = maximize([(-1, ("c", 1)), (-1, ("c", 5)), (-1, ("c", 20))], s)

    assert variable_value(solved, ("c", 1)) == 1
    assert variable_value(solved, ("c", 5)) == 2
    assert variable_value(solved, ("c", 20)) == 5
    assert objective(solved) == -8


def test_coin_change_from_json_example():
    data = json.loads(Path(__file__).parent.parent.joinpath("examples", "coin_change.json").read_text())
    solved = solve(ProblemSpec.model_validate(data).to_model())

    assert objective(solved) == 8
    assert [solved.values[c] for c in ("c1", "c5", "c20")] == [1, 2, 5]


def test_relaxation_bounds_integer_optimum():
    relaxed = maximize(KNAPSACK_VALUES, make_knapsack().model_copy(update={"integral": ()}))
    exact = maximize(KNAPSACK_VALUES, make_knapsack())

    assert objective(exact) == 23
    assert objective(relaxed) >= objective(exact)
    assert objective(relaxed).denominator != 1


def test_no_integrality_reduces_to_single_relaxation():
    model = make_bounded_pair()
    solution = solve_branch_and_bound(model.model_copy(update={"objective": None}))

    assert solution.status == "optimal"
    assert solution.nodes == 0


def test_node_budget_without_incumbent():
    with pytest.raises(NodeLimitReached) as excinfo:
        maximize(KNAPSACK_VALUES, make_knapsack(), SolveOptions(max_nodes=1))
    assert excinfo.value.nodes == 1


def test_depth_budget_without_incumbent():
    with pytest.raises(NodeLimitReached):
        maximize(KNAPSACK_VALUES, make_knapsack(), SolveOptions(max_depth=0))


def test_node_budget_returns_unproven_incumbent():
    solved = maximize(KNAPSACK_VALUES, make_knapsack(), SolveOptions(max_nodes=2))

    assert solved.status == "feasible"
    assert objective(solved) == 17
    assert solved.nodes == 2


def test_integer_infeasible_problem():
    s = constraint(([(2, "x")], "==", 1), gen_state())
    s = constraint(integral("x"), s)
    with pytest.raises(Infeasible):
        maximize([(1, "x")], s)


def test_unbounded_relaxation_propagates():
    s = constraint(integral("x"), gen_state())
    with pytest.raises(Unbounded):
        maximize([(1, "x")], s)
