import pytest

from exotab.analysis.correlations import (
    CorrelationError,
    CorrelationMatrix,
    CorrelationMethod,
    generate_correlation_matrix,
    rank_target_correlations,
)
from exotab.data.dataset import Dataset
from exotab.exceptions import ConfigurationError


@pytest.fixture
def numeric_table() -> Dataset:
    return Dataset.from_records([
        {"A": 1, "B": 2, "C": 5.0, "D": "p"},
        {"A": 2, "B": 4, "C": 3.0, "D": "q"},
        {"A": 3, "B": 6, "C": 4.0, "D": "p"},
        {"A": 4, "B": 8, "C": 1.0, "D": "q"},
    ])


@pytest.mark.parametrize("method", ["pearson", "spearman", "kendall"])
def test_matrix_is_symmetric_with_unit_diagonal(numeric_table, method):
    result = generate_correlation_matrix(numeric_table, method)
    assert isinstance(result, CorrelationMatrix)
    assert result.columns == ["A", "B", "C"]
    n = len(result.columns)
    for i in range(n):
        assert result.matrix[i][i] == pytest.approx(1.0)
        for j in range(n):
            assert result.matrix[i][j] == pytest.approx(result.matrix[j][i])


def test_sample_matrix_uses_numeric_columns_only(sample):
    result = generate_correlation_matrix(sample)
    assert result.columns == ["id", "edad", "salario"]
    assert result.value("edad", "salario") > 0.9


def test_method_aliases(numeric_table):
    assert generate_correlation_matrix(numeric_table, "rank").method == CorrelationMethod.SPEARMAN
    assert CorrelationMethod.parse("Linear") == CorrelationMethod.PEARSON
    assert CorrelationMethod.parse("concordance") == CorrelationMethod.KENDALL


def test_unknown_method_raises(numeric_table):
    with pytest.raises(ConfigurationError):
        generate_correlation_matrix(numeric_table, "cosine")


def test_constant_column_gives_none_cells():
    ds = Dataset.from_records([{"x": 1, "k": 7}, {"x": 2, "k": 7}, {"x": 3, "k": 7}])
    result = generate_correlation_matrix(ds)
    assert result.value("x", "k") is None
    assert result.to_dict()["matrix"][1][1] is None


def test_too_few_numeric_columns():
    ds = Dataset.from_records([{"x": 1, "s": "a"}, {"x": 2, "s": "b"}])
    result = generate_correlation_matrix(ds)
    assert isinstance(result, CorrelationError)
    assert result.to_sentinel().startswith("error: ")


def test_perfectly_linear_target():
    ds = Dataset.from_records([{"A": i, "B": 2 * i} for i in range(1, 5)])
    ranked = rank_target_correlations(ds, "A")
    assert [r.column for r in ranked] == ["B"]
    assert ranked[0].correlation == pytest.approx(1.0)


def test_ranking_sorted_by_magnitude_and_stable():
    ds = Dataset.from_records([
        {"t": 1, "neg": 4, "pos": 1, "weak": 2, "dup": 1},
        {"t": 2, "neg": 3, "pos": 2, "weak": 1, "dup": 2},
        {"t": 3, "neg": 2, "pos": 3, "weak": 2, "dup": 3},
        {"t": 4, "neg": 1, "pos": 4, "weak": 3, "dup": 4},
    ])
    ranked = rank_target_correlations(ds, "t")
    # neg, pos and dup tie at |r| = 1 and keep their column order
    assert [r.column for r in ranked] == ["neg", "pos", "dup", "weak"]
    assert ranked[0].correlation == pytest.approx(-1.0)
    assert ranked == rank_target_correlations(ds, "t")


def test_ranking_uses_pairwise_complete_rows():
    ds = Dataset.from_records([
        {"t": 1, "x": 1.0},
        {"t": 2, "x": None},
        {"t": 3, "x": 3.0},
        {"t": 4, "x": 4.0},
    ])
    ranked = rank_target_correlations(ds, "t", "spearman")
    assert ranked[0].correlation == pytest.approx(1.0)


def test_ranking_missing_or_text_target(numeric_table):
    assert rank_target_correlations(numeric_table, "nope") == []
    assert rank_target_correlations(numeric_table, "D") == []


def test_ranking_excludes_nan():
    ds = Dataset.from_records([{"t": 1, "k": 5}, {"t": 2, "k": 5}, {"t": 3, "k": 5}])
    assert rank_target_correlations(ds, "t") == []
