"""
Tests for synthetic climate generation and climate validation.
"""

import sys
from pathlib import Path

import pandas as pd
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from threepg_tools.climate import (
    climate_period,
    covers_period,
    generate_synthetic_climate,
    month_range,
    validate_climate,
)
from threepg_tools.config import CLIMATE_COLUMNS


class TestMonthRange:
    """Tests for month_range."""

    def test_inclusive(self):
        dates = month_range("2021-01", "2021-12")
        assert len(dates) == 12
        assert dates[0] == pd.Timestamp("2021-01-01")
        assert dates[-1] == pd.Timestamp("2021-12-01")

    def test_step(self):
        dates = month_range("2021-01", "2021-12", step_months=3)
        assert list(dates.month) == [1, 4, 7, 10]

    def test_start_after_end(self):
        with pytest.raises(ValueError):
            month_range("2022-01", "2021-01")

    def test_invalid_step(self):
        with pytest.raises(ValueError, match="step_months"):
            month_range("2021-01", "2021-12", step_months=0)


class TestGenerateSyntheticClimate:
    """Tests for generate_synthetic_climate."""

    def test_one_record_per_month(self):
        climate = generate_synthetic_climate("2021-01", "2023-12")
        assert len(climate) == 36
        assert list(climate.columns) == CLIMATE_COLUMNS
        assert climate[["year", "month"]].drop_duplicates().shape[0] == 36

    @pytest.mark.parametrize(
        "start,end,expected",
        [("2020-06", "2020-06", 1), ("2019-11", "2020-02", 4), ("2000-01", "2009-12", 120)],
    )
    def test_length_matches_range(self, start, end, expected):
        assert len(generate_synthetic_climate(start, end)) == expected

    def test_solar_radiation_floor(self):
        climate = generate_synthetic_climate("2000-01", "2049-12", seed=7)
        assert (climate["srad"] >= 5).all()

    def test_precipitation_floor(self):
        climate = generate_synthetic_climate("2000-01", "2049-12", seed=7)
        assert (climate["prcp"] >= 10).all()

    def test_frost_only_below_zero(self):
        climate = generate_synthetic_climate("2000-01", "2049-12", seed=1)
        warm = climate[climate["tmp_min"] >= 0]
        assert (warm["frost_days"] == 0).all()
        assert (climate["frost_days"] >= 0).all()
        assert (climate["frost_days"] <= 10).all()

    def test_min_ave_max_ordering(self):
        climate = generate_synthetic_climate("2021-01", "2023-12")
        assert (climate["tmp_min"] < climate["tmp_ave"]).all()
        assert (climate["tmp_ave"] < climate["tmp_max"]).all()

    def test_reproducible(self):
        a = generate_synthetic_climate("2021-01", "2023-12", seed=123)
        b = generate_synthetic_climate("2021-01", "2023-12", seed=123)
        pd.testing.assert_frame_equal(a, b)

    def test_seed_changes_noise(self):
        a = generate_synthetic_climate("2021-01", "2023-12", seed=1)
        b = generate_synthetic_climate("2021-01", "2023-12", seed=2)
        assert not a["tmp_ave"].equals(b["tmp_ave"])

    def test_summer_warmer_than_winter(self):
        climate = generate_synthetic_climate("2000-01", "2019-12")
        by_month = climate.groupby("month")["tmp_ave"].mean()
        assert by_month[9] > by_month[3]

    def test_constant_atmosphere(self):
        climate = generate_synthetic_climate("2021-01", "2021-12", co2=420, d13catm=-9)
        assert (climate["co2"] == 420).all()
        assert (climate["d13catm"] == -9).all()

    def test_output_is_valid(self):
        validate_climate(generate_synthetic_climate("2021-01", "2023-12"))


def _climate(months):
    return pd.DataFrame(
        {
            "year": [y for y, _ in months],
            "month": [m for _, m in months],
            "tmp_min": 1.0,
            "tmp_max": 20.0,
            "tmp_ave": 10.0,
            "prcp": 50.0,
            "srad": 12.0,
            "frost_days": 0.0,
            "co2": 410.0,
            "d13catm": -8.0,
        }
    )


class TestValidateClimate:
    """Tests for validate_climate."""

    def test_missing_column(self):
        climate = _climate([(2021, 1)]).drop(columns=["srad"])
        with pytest.raises(ValueError, match="srad"):
            validate_climate(climate)

    def test_duplicate_month(self):
        with pytest.raises(ValueError, match="Duplicate"):
            validate_climate(_climate([(2021, 1), (2021, 1)]))

    def test_out_of_order(self):
        with pytest.raises(ValueError, match="chronological"):
            validate_climate(_climate([(2021, 2), (2021, 1)]))

    def test_year_boundary_in_order(self):
        validate_climate(_climate([(2021, 12), (2022, 1)]))

    def test_non_positive_radiation(self):
        climate = _climate([(2021, 1), (2021, 2)])
        climate.loc[1, "srad"] = 0.0
        with pytest.raises(ValueError, match="Solar radiation"):
            validate_climate(climate)

    def test_empty(self):
        with pytest.raises(ValueError, match="empty"):
            validate_climate(_climate([]))


class TestClimatePeriod:
    """Tests for climate_period and covers_period."""

    def test_period(self):
        climate = _climate([(2021, 11), (2021, 12), (2022, 1)])
        assert climate_period(climate) == ("2021-11", "2022-01")

    def test_covers(self):
        climate = _climate([(2021, 11), (2021, 12), (2022, 1)])
        assert covers_period(climate, "2021-11", "2022-01")
        assert covers_period(climate, "2021-12", "2021-12")

    def test_gap_not_covered(self):
        climate = _climate([(2021, 11), (2022, 1)])
        assert not covers_period(climate, "2021-11", "2022-01")

    def test_beyond_range_not_covered(self):
        climate = _climate([(2021, 11), (2021, 12)])
        assert not covers_period(climate, "2021-11", "2022-01")
