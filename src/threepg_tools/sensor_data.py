"""
Sensor data loading, monthly aggregation and climate gap filling.

Turns raw high-frequency sensor readings into the monthly climate table
r3PG needs. Variables the sensors do not measure (precipitation, solar
radiation, frost days, CO2, delta 13C) are ESTIMATED and flagged as such:
the estimators are rough placeholders, not calibrated relationships.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import pandas as pd

from .config import CLIMATE_COLUMNS, SOLAR_RADIATION_FLOOR, ClimateConstants


# Raw CSV column -> internal name
SENSOR_COLUMNS = {
    "variables.temperature": "temperature",
    "variables.humidity": "humidity",
    "variables.visibleLight": "visible_light",
    "variables.infraredLight": "infrared_light",
    "variables.soilMoisture": "soil_moisture",
    "variables.soilTemp": "soil_temp",
}

TIMESTAMP_COLUMN = "timestamp"

# Columns of the gap-filled climate table that are estimated, not measured
ESTIMATED_COLUMNS = ["prcp", "srad", "frost_days", "co2", "d13catm"]

FROST_DAYS_ESTIMATE = 5


class SensorDataError(ValueError):
    """Raised when a sensor file cannot be parsed."""


def load_sensor_data(filepath: Path | str) -> pd.DataFrame:
    """
    Load raw sensor readings from CSV.

    Args:
        filepath: CSV with an ISO-8601 "timestamp" column and
            "variables.*" measurement columns

    Timestamps are converted to UTC, so files whose UTC offset changes (a
    logger crossing a daylight-saving switch) parse consistently; naive
    timestamps are taken as UTC.

    Returns:
        DataFrame with a parsed "date" column (UTC) and snake_case measurements

    Raises:
        FileNotFoundError: If the file doesn't exist
        SensorDataError: If columns are missing or any timestamp is absent
            or malformed
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Sensor data file not found: {filepath}")

    df = pd.read_csv(filepath)

    required_cols = [TIMESTAMP_COLUMN, *SENSOR_COLUMNS]
    missing = [col for col in required_cols if col not in df.columns]
    if missing:
        raise SensorDataError(f"Sensor data missing required columns: {missing}")

    if df[TIMESTAMP_COLUMN].isna().any():
        rows = df.index[df[TIMESTAMP_COLUMN].isna()].tolist()
        raise SensorDataError(f"Missing timestamps in rows: {rows[:10]}")

    try:
        dates = pd.to_datetime(df[TIMESTAMP_COLUMN], format="ISO8601", utc=True)
    except (ValueError, TypeError) as e:
        raise SensorDataError(f"Malformed timestamp in {filepath.name}: {e}") from e

    samples = df[list(SENSOR_COLUMNS)].rename(columns=SENSOR_COLUMNS)
    samples = samples.apply(pd.to_numeric, errors="coerce")
    samples.insert(0, "date", dates)

    return samples


def aggregate_monthly(samples: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate sensor samples to calendar months (UTC).

    Missing values are ignored by each aggregate independently. A month in
    which one variable is entirely missing gets NaN for that variable only.

    Args:
        samples: Output of load_sensor_data()

    Returns:
        DataFrame with one row per (year, month) in chronological order
    """
    if len(samples) == 0:
        raise SensorDataError("No sensor samples to aggregate")

    grouped = samples.assign(
        year=samples["date"].dt.year,
        month=samples["date"].dt.month,
    ).groupby(["year", "month"], sort=True)

    monthly = grouped.agg(
        tmp_min=("temperature", "min"),
        tmp_max=("temperature", "max"),
        tmp_ave=("temperature", "mean"),
        humidity=("humidity", "mean"),
        visible_light=("visible_light", "mean"),
        infrared_light=("infrared_light", "mean"),
        soil_moisture=("soil_moisture", "mean"),
        soil_temp=("soil_temp", "mean"),
        n_samples=("date", "size"),
    )

    return monthly.reset_index()


# ============================================================================
# Estimators
# ============================================================================


def estimate_precipitation(
    monthly: pd.DataFrame, rng: np.random.Generator
) -> pd.Series:
    """
    Precipitation (mm) from mean humidity: 20 + 1.5 * humidity + N(0, 10).

    Placeholder relationship; replace with measured rainfall when available.
    """
    noise = rng.normal(0, 10, len(monthly))
    return 20 + 1.5 * monthly["humidity"] + noise


def estimate_solar_radiation(monthly: pd.DataFrame) -> pd.Series:
    """
    Solar radiation (MJ/m2/day) from light sensors, floored at 5.

    Placeholder conversion; real sensors need calibration.
    """
    raw = 0.15 * (monthly["visible_light"] + monthly["infrared_light"])
    return raw.clip(lower=SOLAR_RADIATION_FLOOR)


def estimate_frost_days(monthly: pd.DataFrame) -> pd.Series:
    """5 frost days for months whose minimum temperature is below zero, else 0."""
    return pd.Series(
        np.where(monthly["tmp_min"] < 0, FROST_DAYS_ESTIMATE, 0),
        index=monthly.index,
    )


@dataclass
class ClimateEstimators:
    """
    Strategies used to fill climate variables the sensors don't measure.

    Attributes:
        precipitation: Callable(monthly, rng) -> Series of mm
        solar_radiation: Callable(monthly) -> Series of MJ/m2/day
        frost_days: Callable(monthly) -> Series of day counts
    """

    precipitation: Callable[[pd.DataFrame, np.random.Generator], pd.Series] = field(
        default=estimate_precipitation
    )
    solar_radiation: Callable[[pd.DataFrame], pd.Series] = field(
        default=estimate_solar_radiation
    )
    frost_days: Callable[[pd.DataFrame], pd.Series] = field(
        default=estimate_frost_days
    )


def fill_climate_gaps(
    monthly: pd.DataFrame,
    estimators: ClimateEstimators | None = None,
    constants: ClimateConstants | None = None,
    seed: int | None = None,
) -> pd.DataFrame:
    """
    Complete aggregated sensor data into a model-ready climate table.

    Args:
        monthly: Output of aggregate_monthly()
        estimators: Estimation strategies (defaults to the built-in placeholders)
        constants: Fixed CO2 and delta 13C values
        seed: Random seed for the precipitation noise

    Returns:
        Climate DataFrame with the r3PG columns. The names of estimated
        columns are stored in ``climate.attrs["estimated_columns"]``.
    """
    estimators = estimators or ClimateEstimators()
    constants = constants or ClimateConstants()
    rng = np.random.default_rng(seed)

    monthly = monthly.sort_values(["year", "month"]).reset_index(drop=True)

    climate = monthly[["year", "month", "tmp_min", "tmp_max", "tmp_ave"]].copy()
    climate["prcp"] = estimators.precipitation(monthly, rng).to_numpy()
    climate["srad"] = estimators.solar_radiation(monthly).to_numpy()
    climate["frost_days"] = estimators.frost_days(monthly).to_numpy()
    climate["co2"] = constants.co2
    climate["d13catm"] = constants.d13catm

    climate = climate[CLIMATE_COLUMNS]
    climate.attrs["estimated_columns"] = list(ESTIMATED_COLUMNS)

    return climate


def estimated_columns(climate: pd.DataFrame) -> list[str]:
    """Names of the climate columns that were estimated rather than measured."""
    return list(climate.attrs.get("estimated_columns", []))


def build_sensor_climate(
    filepath: Path | str,
    estimators: ClimateEstimators | None = None,
    constants: ClimateConstants | None = None,
    seed: int | None = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Load a sensor file and turn it into a climate table.

    Returns:
        Tuple of (climate, monthly_sensor_summary)
    """
    samples = load_sensor_data(filepath)

    print(
        f"Sensor data range: {samples['date'].min():%Y-%m-%d} "
        f"to {samples['date'].max():%Y-%m-%d} ({len(samples)} samples)"
    )

    monthly = aggregate_monthly(samples)
    climate = fill_climate_gaps(monthly, estimators, constants, seed)

    return climate, monthly
