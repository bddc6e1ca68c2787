"""
3-PG Tools - Library for running 3-PG forest growth projections from Python.

This package provides utilities for:
- Building synthetic or sensor-derived monthly climate tables
- Assembling site and species inputs for the r3PG model
- Running r3PG through Rscript with configuration fallback
- Aggregating model output into species/stand biomass and carbon
- Exporting CSV tables and PNG charts
"""

from .aggregation import (
    ZeroBaselineError,
    aggregate_results,
    biomass_to_carbon,
    carbon_to_co2e,
    extract_biomass,
    plot_area_hectares,
    species_biomass,
    stand_biomass,
    stand_carbon,
    summarize_series,
    summarize_variables,
    tonnes_to_short_tons,
)
from .climate import generate_synthetic_climate, validate_climate
from .config import (
    ALTERNATE_SETTINGS,
    DEFAULT_CANDIDATES,
    PRIMARY_SETTINGS,
    SINGLE_SPECIES_SETTINGS,
    CarbonConstants,
    ClimateConstants,
    ModelRunOptions,
    ModelSettings,
    SiteConfig,
    SpeciesState,
)
from .model_input import validate_site_climate
from .output_parser import parse_model_output
from .pipeline import run_script, run_sensor_pipeline, run_synthetic_pipeline
from .sensor_data import (
    ClimateEstimators,
    SensorDataError,
    aggregate_monthly,
    build_sensor_climate,
    fill_climate_gaps,
    load_sensor_data,
)
from .simulation import ModelRunError, RScriptGrowthModel, run_growth_model

__all__ = [
    "SiteConfig",
    "SpeciesState",
    "CarbonConstants",
    "ClimateConstants",
    "ModelRunOptions",
    "ModelSettings",
    "PRIMARY_SETTINGS",
    "SINGLE_SPECIES_SETTINGS",
    "ALTERNATE_SETTINGS",
    "DEFAULT_CANDIDATES",
    "generate_synthetic_climate",
    "validate_climate",
    "validate_site_climate",
    "load_sensor_data",
    "aggregate_monthly",
    "fill_climate_gaps",
    "build_sensor_climate",
    "ClimateEstimators",
    "SensorDataError",
    "RScriptGrowthModel",
    "run_growth_model",
    "ModelRunError",
    "parse_model_output",
    "extract_biomass",
    "species_biomass",
    "stand_biomass",
    "stand_carbon",
    "biomass_to_carbon",
    "carbon_to_co2e",
    "plot_area_hectares",
    "tonnes_to_short_tons",
    "summarize_series",
    "summarize_variables",
    "aggregate_results",
    "ZeroBaselineError",
    "run_synthetic_pipeline",
    "run_sensor_pipeline",
    "run_script",
]
