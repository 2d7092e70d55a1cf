from fractions import Fraction

import pytest

from exactlp import Infeasible, SolveOptions, constraint, gen_state, minimize
from exactlp.lp.simplex import solve_tableau
from exactlp.lp.utils import build_tableau
from exactlp.model import as_model


def make_mixed_relations():
    s = gen_state()
    s = constraint(([("3/10", "x1"), ("1/10", "x2")], "<=", "27/10"), s)
    s = constraint(([("1/2", "x1"), ("1/2", "x2")], "==", 6), s, name="balance")
    s = constraint(([("3/5", "x1"), ("2/5", "x2")], ">=", 6), s)
    return minimize([("2/5", "x1"), ("1/2", "x2")], s).model


def test_columns_follow_row_relations():
    tableau = build_tableau(make_mixed_relations())

    assert tableau.col_types == ["structural", "structural", "slack", "artificial", "surplus", "artificial"]
    assert tableau.col_labels[:2] == ["x1", "x2"]
    assert tableau.basis == [2, 3, 5]
    assert tableau.row_names == [None, "balance", None]
    assert tableau.phase == 1


def test_phase_one_objective_row():
    tableau = build_tableau(make_mixed_relations())

    assert list(tableau.matrix[-1]) == [
        Fraction(-11, 10),
        Fraction(-9, 10),
        0,
        0,
        1,
        0,
        -12,
    ]
    assert tableau.working_value() == 12


def test_all_slack_model_starts_in_phase_two():
    s = constraint(([(1, "x"), (1, "y")], "<=", 4), gen_state())
    tableau = build_tableau(minimize([(-1, "x"), (2, "y")], s).model)

    assert tableau.phase == 2
    assert tableau.artificial_columns() == []
    assert list(tableau.matrix[-1]) == [-1, 2, 0, 0]


def test_negative_rhs_row_is_flipped():
    s = constraint(([(-1, "x"), (-1, "y")], "<=", -3), gen_state(), name="neg")
    tableau = build_tableau(as_model(s))

    assert tableau.row_signs == [-1]
    assert tableau.col_types == ["structural", "structural", "surplus", "artificial"]
    assert list(tableau.matrix[0]) == [1, 1, -1, 1, 3]


def test_trivial_rows_are_dropped_or_rejected():
    s = constraint(([], "<=", 5), gen_state(), name="empty")
    s = constraint(([(1, "x")], "<=", 2), s)
    tableau = build_tableau(s)

    assert tableau.num_rows == 1
    assert tableau.dropped_names == ["empty"]

    with pytest.raises(Infeasible):
        build_tableau(constraint(([], ">=", 1), gen_state()))


def test_terminal_tableau_is_canonical():
    tableau = build_tableau(make_mixed_relations())
    result = solve_tableau(tableau, SolveOptions())

    assert result["status"] == "optimal"
    T = tableau.matrix
    for row, basic in enumerate(tableau.basis):
        column = [T[i, basic] for i in range(tableau.num_rows + 1)]
        expected = [1 if i == row else 0 for i in range(tableau.num_rows + 1)]
        assert column == expected
        assert tableau.rhs(row) >= 0
    assert all(tableau.reduced_cost(col) >= 0 for col in range(tableau.num_columns)
               if col not in tableau.artificial_columns())
    assert tableau.working_value() == Fraction(21, 4)
    assert tableau.describe()["phase"] == 2
