import pytest

from euro_mc_pricer.results import CSV_COLUMNS, MonteCarloResult


@pytest.fixture
def result():
    return MonteCarloResult(price=8.0, standard_error=0.5, ci_lower=7.02, ci_upper=8.98, n_paths=1000)


def test_derived_quantities(result):
    assert result.margin_of_error == pytest.approx(0.98)
    assert result.width == pytest.approx(1.96)
    assert result.contains(8.5)
    assert not result.contains(9.5)


def test_to_row_uses_csv_header(result):
    row = result.to_row()
    assert list(row) == CSV_COLUMNS == ["Simulations", "Price", "StandardError", "CILower", "CIUpper"]
    assert row["Simulations"] == 1000
    assert row["CIUpper"] == 8.98


def test_to_dict(result):
    assert result.to_dict()["confidence_level"] == 0.95


def test_immutable(result):
    with pytest.raises(AttributeError):
        result.price = 1.0
