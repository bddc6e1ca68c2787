"""
End-to-end pipelines: climate -> r3PG -> biomass/carbon -> CSV and PNG.

Both pipelines write nothing to output_dir until the growth model has
produced output, so a failed run leaves no partial exports behind.
"""

import sys
from collections.abc import Callable, Sequence
from dataclasses import replace
from pathlib import Path

import pandas as pd

from .aggregation import ZeroBaselineError, aggregate_results
from .climate import climate_period, generate_synthetic_climate
from .config import (
    DEFAULT_CANDIDATES,
    CarbonConstants,
    ClimateConstants,
    ModelRunOptions,
    ModelSettings,
    SiteConfig,
    SpeciesState,
)
from .model_input import validate_site_climate
from .plotting import save_plots
from .reporting import export_tables, print_estimation_notice
from .sensor_data import ClimateEstimators, build_sensor_climate, estimated_columns
from .simulation import (
    GrowthModel,
    ModelRunError,
    RScriptGrowthModel,
    format_diagnostics,
    run_growth_model,
)


# Default exports (result key -> file name)
STAND_CSV_FILES = {
    "species_biomass": "species_biomass_per_ha.csv",
    "stand_biomass": "stand_biomass_per_ha.csv",
    "stand_carbon": "stand_carbon.csv",
}

STAND_PLOT_FILES = {
    "plot_carbon_short_tons": "total_carbon_over_time_short_tons.png",
    "species_carbon": "carbon_over_time_by_species_per_ha.png",
}

SENSOR_CSV_FILES = {
    "climate": "processed_climate_data.csv",
    "species_biomass": "species_biomass_results.csv",
    "stand_biomass": "stand_biomass_results.csv",
    "stand_carbon": "carbon_results.csv",
}

SENSOR_PLOT_FILES = {
    "stand_biomass": "total_biomass_from_sensor_data.png",
    "species_biomass": "species_biomass_from_sensor_data.png",
    "plot_carbon_tonnes": "carbon_from_sensor_data.png",
}


def _run(
    site: SiteConfig,
    climate: pd.DataFrame,
    species: list[SpeciesState],
    output_dir: Path,
    model: GrowthModel | None,
    candidates: Sequence[ModelSettings],
    constants: CarbonConstants,
    options: ModelRunOptions | None,
    csv_files: dict[str, str],
    plot_files: dict[str, str],
) -> dict:
    validate_site_climate(site, climate)

    if model is None:
        model = RScriptGrowthModel(output_dir / "r3pg_runs", options)

    output, settings = run_growth_model(site, climate, species, model, candidates)

    results = aggregate_results(output, site, constants)
    results["climate"] = climate
    results["model_output"] = output
    results["settings"] = settings

    tables = {k: v for k, v in results.items() if isinstance(v, pd.DataFrame)}
    results["csv_files"] = export_tables(tables, output_dir, csv_files)
    results["plot_files"] = save_plots(results, output_dir, plot_files)

    return results


def run_synthetic_pipeline(
    site: SiteConfig,
    species: list[SpeciesState],
    output_dir: Path | str,
    model: GrowthModel | None = None,
    candidates: Sequence[ModelSettings] = DEFAULT_CANDIDATES,
    constants: CarbonConstants | None = None,
    options: ModelRunOptions | None = None,
    climate_seed: int = 123,
    csv_files: dict[str, str] | None = None,
    plot_files: dict[str, str] | None = None,
) -> dict:
    """
    Project a stand on synthetic seasonal climate.

    Args:
        site: Site configuration (start/end define the climate period)
        species: Species in the stand
        output_dir: Directory for CSV/PNG exports
        model: Growth model (defaults to r3PG via Rscript)
        candidates: Model settings to try, in order
        constants: Carbon conversion constants
        options: Rscript options for the default model
        climate_seed: Seed of the synthetic climate noise
        csv_files: Tables to export (defaults to STAND_CSV_FILES)
        plot_files: Charts to save (defaults to STAND_PLOT_FILES)

    Returns:
        Aggregated results (see aggregate_results) plus climate, model_output,
        settings, csv_files and plot_files

    Raises:
        ModelRunError: If every model configuration failed
    """
    output_dir = Path(output_dir)
    constants = constants or CarbonConstants()

    climate = generate_synthetic_climate(site.start, site.end, seed=climate_seed)

    print(f"Synthetic climate: {site.start} to {site.end} ({len(climate)} months)")
    print(f"Species: {', '.join(s.name for s in species)}")

    return _run(
        site,
        climate,
        species,
        output_dir,
        model,
        candidates,
        constants,
        options,
        STAND_CSV_FILES if csv_files is None else csv_files,
        STAND_PLOT_FILES if plot_files is None else plot_files,
    )


def run_sensor_pipeline(
    sensor_file: Path | str,
    site: SiteConfig,
    species: list[SpeciesState],
    output_dir: Path | str,
    model: GrowthModel | None = None,
    candidates: Sequence[ModelSettings] = DEFAULT_CANDIDATES,
    constants: CarbonConstants | None = None,
    options: ModelRunOptions | None = None,
    estimators: ClimateEstimators | None = None,
    climate_constants: ClimateConstants | None = None,
    seed: int | None = None,
    plant_at_start: bool = True,
    csv_files: dict[str, str] | None = None,
    plot_files: dict[str, str] | None = None,
) -> dict:
    """
    Project a stand on climate derived from sensor readings.

    The simulation period is reset to the months covered by the sensor data;
    with plant_at_start, every species is planted in the first month.

    Args:
        sensor_file: Raw sensor CSV
        site: Site configuration (start/end are replaced)
        species: Species in the stand
        output_dir: Directory for CSV/PNG exports
        model: Growth model (defaults to r3PG via Rscript)
        candidates: Model settings to try, in order
        constants: Carbon conversion constants
        options: Rscript options for the default model
        estimators: Strategies for unmeasured climate variables
        climate_constants: Fixed CO2 and delta 13C
        seed: Seed of the precipitation estimate noise
        plant_at_start: Set every species' planting month to the first month
        csv_files: Tables to export (defaults to SENSOR_CSV_FILES)
        plot_files: Charts to save (defaults to SENSOR_PLOT_FILES)

    Returns:
        Same as run_synthetic_pipeline, plus monthly_sensor and
        estimated_columns

    Raises:
        SensorDataError: If the sensor file is malformed
        ModelRunError: If every model configuration failed
    """
    output_dir = Path(output_dir)
    constants = constants or CarbonConstants()

    climate, monthly = build_sensor_climate(sensor_file, estimators, climate_constants, seed)

    start, end = climate_period(climate)
    site = replace(site, start=start, end=end)
    if plant_at_start:
        species = [replace(s, planted=start) for s in species]

    print(f"Sensor climate: {start} to {end} ({len(climate)} months)")

    results = _run(
        site,
        climate,
        species,
        output_dir,
        model,
        candidates,
        constants,
        options,
        SENSOR_CSV_FILES if csv_files is None else csv_files,
        SENSOR_PLOT_FILES if plot_files is None else plot_files,
    )
    results["monthly_sensor"] = monthly
    results["estimated_columns"] = estimated_columns(climate)

    print_estimation_notice(results["estimated_columns"])

    return results


def run_script(pipeline: Callable[..., dict], **kwargs) -> dict:
    """
    Run a pipeline from a batch script.

    On ModelRunError the diagnostics are printed and the process exits with
    status 1. A stand that starts with no biomass at all exits the same way.
    """
    try:
        return pipeline(**kwargs)
    except ModelRunError as e:
        print()
        print(format_diagnostics(e))
        print("\nModel run failed. Check the error messages above.")
        sys.exit(1)
    except ZeroBaselineError as e:
        print(f"\nCannot summarize results: {e}")
        print("Check that at least one species starts with non-zero biomass.")
        sys.exit(1)
