"""
r3PG input tables.

Converts SiteConfig / SpeciesState objects into the data frames r3PG reads,
and writes them as CSV files for the R driver script.
"""

from pathlib import Path

import pandas as pd

from .climate import climate_period, covers_period, validate_climate
from .config import CLIMATE_COLUMNS, SiteConfig, SpeciesState


SPECIES_COLUMNS = [
    "species",
    "planted",
    "fertility",
    "stems_n",
    "biom_stem",
    "biom_root",
    "biom_foliage",
]

# File names inside a run directory
SITE_FILE = "site.csv"
CLIMATE_FILE = "climate.csv"
SPECIES_FILE = "species.csv"
PARAMETER_MAP_FILE = "parameter_map.csv"


def build_site_table(site: SiteConfig) -> pd.DataFrame:
    """One-row site table in r3PG layout."""
    return pd.DataFrame(
        [
            {
                "latitude": site.latitude,
                "altitude": site.altitude,
                "soil_class": site.soil_class_code,
                "asw_i": site.asw_i,
                "asw_min": site.asw_min,
                "asw_max": site.asw_max,
                "from": site.start,
                "to": site.end,
            }
        ]
    )


def build_species_table(species: list[SpeciesState]) -> pd.DataFrame:
    """
    Species table in r3PG layout, one row per species.

    Raises:
        ValueError: If the list is empty or species names repeat
    """
    if len(species) == 0:
        raise ValueError("At least one species is required")

    names = [s.name for s in species]
    if len(names) != len(set(names)):
        duplicates = {name for name in names if names.count(name) > 1}
        raise ValueError(f"Duplicate species names: {duplicates}")

    rows = [
        {
            "species": s.name,
            "planted": s.planted,
            "fertility": s.fertility,
            "stems_n": s.stems_n,
            "biom_stem": s.biom_stem,
            "biom_root": s.biom_root,
            "biom_foliage": s.biom_foliage,
        }
        for s in species
    ]
    return pd.DataFrame(rows, columns=SPECIES_COLUMNS)


def build_parameter_map(species: list[SpeciesState]) -> pd.DataFrame:
    """Which parameter-table column each species borrows its physiology from."""
    return pd.DataFrame(
        {
            "species": [s.name for s in species],
            "parameter_species": [s.parameters_from for s in species],
        }
    )


def validate_site_climate(site: SiteConfig, climate: pd.DataFrame) -> None:
    """
    Check the simulation period is covered by the climate records.

    Raises:
        ValueError: If the climate table is invalid or misses a simulated month
    """
    validate_climate(climate)

    if not covers_period(climate, site.start, site.end):
        first, last = climate_period(climate)
        raise ValueError(
            f"Simulation period {site.start} to {site.end} is not covered "
            f"by climate records ({first} to {last})"
        )


def write_model_inputs(
    site: SiteConfig,
    climate: pd.DataFrame,
    species: list[SpeciesState],
    working_dir: Path | str,
) -> dict[str, Path]:
    """
    Write site, climate, species and parameter-map CSVs for the R driver.

    Returns:
        Dictionary mapping table names to written paths
    """
    working_dir = Path(working_dir)
    working_dir.mkdir(parents=True, exist_ok=True)

    tables = {
        "site": (build_site_table(site), SITE_FILE),
        "climate": (climate[CLIMATE_COLUMNS], CLIMATE_FILE),
        "species": (build_species_table(species), SPECIES_FILE),
        "parameter_map": (build_parameter_map(species), PARAMETER_MAP_FILE),
    }

    paths = {}
    for name, (df, filename) in tables.items():
        path = working_dir / filename
        df.to_csv(path, index=False)
        paths[name] = path

    return paths
