from datetime import date

import numpy as np
import pytest

from volcal.core.errors import InvalidInputError, OutOfRangeError
from volcal.termstructures import SwaptionVolatilityMatrix
from volcal.time import EvaluationDate


@pytest.fixture
def matrix():
    return SwaptionVolatilityMatrix(
        ["1Y", "2Y"],
        ["1Y", "5Y"],
        [[0.10, 0.20], [0.30, 0.40]],
        reference_date=date(2023, 1, 2),
    )


def test_grid_axes_are_year_fractions(matrix):
    np.testing.assert_allclose(matrix.option_times(), [1.0, 731 / 365])
    np.testing.assert_allclose(matrix.swap_lengths(), [1.0, 1826 / 365])
    assert matrix.max_date == date(2025, 1, 2)
    assert str(matrix.max_swap_tenor()) == "5Y"


def test_nodes_and_bilinear_midpoint(matrix):
    times, lengths = matrix.option_times(), matrix.swap_lengths()
    assert matrix.volatility(times[0], lengths[0], 0.0) == pytest.approx(0.10)
    assert matrix.volatility(times[1], lengths[1], 0.0) == pytest.approx(0.40)
    assert matrix.volatility(times.mean(), lengths.mean(), 0.0) == pytest.approx(0.25)


def test_domain_is_the_grid_unless_extrapolating(matrix):
    times, lengths = matrix.option_times(), matrix.swap_lengths()
    with pytest.raises(OutOfRangeError):
        matrix.volatility(times[0], lengths[1] + 0.1, 0.0)
    with pytest.raises(OutOfRangeError):
        matrix.volatility(3.0, lengths[0], 0.0)
    extended = matrix.volatility(times[0], lengths[1] + 0.1, 0.0, extrapolate=True)
    assert extended > 0.20


def test_tenor_queries_are_bounded_by_the_tenor_axis(matrix):
    # a 5Y swap starting in 2024 spans two leap days, one more than the grid axis
    assert matrix.volatility("1Y", "5Y", 0.0) == pytest.approx(0.20, abs=1e-3)
    assert matrix.black_variance(date(2024, 1, 2), "5Y", 0.0) == pytest.approx(0.04, abs=1e-3)
    with pytest.raises(OutOfRangeError):
        matrix.volatility("1Y", "6Y", 0.0)

    option_time, swap_length = matrix.convert_dates(date(2024, 1, 2), "5Y")
    assert swap_length > matrix.max_swap_length()
    with pytest.raises(OutOfRangeError):
        matrix.volatility(option_time, swap_length, 0.0)
    assert matrix.volatility("1Y", "1Y", 0.0) == pytest.approx(0.10, abs=1e-3)


def test_matrix_reanchors_with_evaluation_date():
    provider = EvaluationDate(date(2023, 1, 2))
    matrix = SwaptionVolatilityMatrix(
        ["1Y", "2Y"], ["1Y", "5Y"], [[0.10, 0.20], [0.30, 0.40]], evaluation_date=provider
    )
    provider.set(date(2024, 1, 2))
    assert matrix.max_date == date(2026, 1, 2)
    # 2024 is a leap year
    np.testing.assert_allclose(matrix.option_times(), [366 / 365, 731 / 365])


def test_malformed_grids_are_rejected():
    with pytest.raises(InvalidInputError):
        SwaptionVolatilityMatrix(
            ["1Y", "2Y"], ["1Y", "5Y"], [[0.1, 0.2, 0.3]], reference_date=date(2023, 1, 2)
        )
    with pytest.raises(InvalidInputError):
        SwaptionVolatilityMatrix(
            ["2Y", "1Y"], ["1Y", "5Y"], [[0.1, 0.2], [0.3, 0.4]], reference_date=date(2023, 1, 2)
        )
    with pytest.raises(InvalidInputError):
        SwaptionVolatilityMatrix(["1Y"], ["1Y"], [[0.1]], reference_date=date(2023, 1, 2))
