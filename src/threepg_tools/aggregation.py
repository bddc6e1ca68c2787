"""
Biomass and carbon aggregation of r3PG output.

Converts long-form model output into species- and stand-level series.

Biomass components (stem, root, foliage) are POOL variables: each row is the
standing stock at that date. Totals therefore sum components and species at
a date; they are never summed over time.
"""

from typing import Any

import pandas as pd

from .config import (
    ACRE_IN_HECTARES,
    CARBON_FRACTION,
    CO2_PER_CARBON,
    SHORT_TONS_PER_TONNE,
    CarbonConstants,
    SiteConfig,
)
from .output_parser import get_variables


BIOMASS_COMPONENTS = ["biom_stem", "biom_root", "biom_foliage"]

COMPONENT_LABELS = {
    "biom_stem": "Stem",
    "biom_root": "Root",
    "biom_foliage": "Foliage",
}


class ZeroBaselineError(ValueError):
    """Raised when a percent change is requested against a zero initial value."""


# ============================================================================
# Unit Conversions
# ============================================================================


def biomass_to_carbon(biomass, carbon_fraction: float = CARBON_FRACTION):
    """Dry biomass to carbon mass (same units)."""
    return biomass * carbon_fraction


def plot_area_hectares(acres: float) -> float:
    """Convert a plot area in acres to hectares."""
    return acres * ACRE_IN_HECTARES


def tonnes_to_short_tons(tonnes, factor: float = SHORT_TONS_PER_TONNE):
    """Metric tonnes (Mg) to short tons."""
    return tonnes * factor


def carbon_to_co2e(carbon, factor: float = CO2_PER_CARBON):
    """Carbon mass to CO2-equivalent mass."""
    return carbon * factor


def percent_change(initial: float, final: float) -> float:
    """
    Percent change from initial to final.

    Raises:
        ZeroBaselineError: If initial is exactly zero
    """
    if initial == 0:
        raise ZeroBaselineError("Cannot compute percent change from an initial value of 0")
    return (final / initial - 1) * 100


def percent_change_or_nan(initial: float, final: float) -> float:
    """Percent change from initial to final, NaN when initial is exactly zero."""
    try:
        return percent_change(initial, final)
    except ZeroBaselineError:
        return float("nan")


# ============================================================================
# Biomass Series
# ============================================================================


def extract_biomass(output: pd.DataFrame) -> pd.DataFrame:
    """
    Biomass component rows of the model output.

    Returns:
        DataFrame with date, species, variable, value
    """
    biomass = get_variables(output, BIOMASS_COMPONENTS)
    return biomass[["date", "species", "variable", "value"]]


def species_biomass(biomass: pd.DataFrame) -> pd.DataFrame:
    """
    Total biomass per species and date (stem + root + foliage).

    Returns:
        DataFrame with date, species, total_biomass_ha (Mg/ha)
    """
    result = (
        biomass.groupby(["date", "species"], as_index=False)["value"]
        .sum()
        .rename(columns={"value": "total_biomass_ha"})
    )
    return result.sort_values(["date", "species"]).reset_index(drop=True)


def stand_biomass(species_df: pd.DataFrame) -> pd.DataFrame:
    """
    Stand biomass per date, summed across species.

    Returns:
        DataFrame with date, stand_biomass_ha (Mg/ha)
    """
    result = (
        species_df.groupby("date", as_index=False)["total_biomass_ha"]
        .sum()
        .rename(columns={"total_biomass_ha": "stand_biomass_ha"})
    )
    return result.sort_values("date").reset_index(drop=True)


def stand_carbon(
    stand_df: pd.DataFrame, constants: CarbonConstants | None = None
) -> pd.DataFrame:
    """
    Stand carbon per hectare and for the whole plot.

    Returns:
        Copy of stand_df with:
            - stand_carbon_ha: Mg C/ha
            - total_carbon_tonnes: Mg C on the plot
            - total_carbon_short_tons: short tons C on the plot
    """
    constants = constants or CarbonConstants()

    result = stand_df.copy()
    result["stand_carbon_ha"] = biomass_to_carbon(
        result["stand_biomass_ha"], constants.carbon_fraction
    )
    result["total_carbon_tonnes"] = result["stand_carbon_ha"] * constants.plot_area_ha
    result["total_carbon_short_tons"] = tonnes_to_short_tons(
        result["total_carbon_tonnes"], constants.short_tons_per_tonne
    )
    return result


def species_carbon(
    species_df: pd.DataFrame, constants: CarbonConstants | None = None
) -> pd.DataFrame:
    """
    Carbon and CO2-equivalent per species and date (per hectare).

    Returns:
        Copy of species_df with carbon_ha and co2e_ha
    """
    constants = constants or CarbonConstants()

    result = species_df.copy()
    result["carbon_ha"] = biomass_to_carbon(
        result["total_biomass_ha"], constants.carbon_fraction
    )
    result["co2e_ha"] = carbon_to_co2e(result["carbon_ha"], constants.co2_per_carbon)
    return result


def biomass_change_by_step(
    species_df: pd.DataFrame, constants: CarbonConstants | None = None
) -> pd.DataFrame:
    """
    Step-to-step biomass change per species.

    The first step of each species has no previous value, so its change and
    percent change are NaN. A step whose previous biomass is exactly zero
    (e.g. after complete mortality) also gets a NaN percent change.

    Returns:
        Copy of species_df with prev_biomass, biomass_change, percent_change,
        carbon_change and co2_change

    """
    constants = constants or CarbonConstants()

    result = species_df.sort_values(["species", "date"]).copy()
    result["prev_biomass"] = result.groupby("species")["total_biomass_ha"].shift(1)

    result["biomass_change"] = result["total_biomass_ha"] - result["prev_biomass"]
    baseline = result["prev_biomass"].where(result["prev_biomass"] != 0)
    result["percent_change"] = result["biomass_change"] / baseline * 100
    result["carbon_change"] = biomass_to_carbon(
        result["biomass_change"], constants.carbon_fraction
    )
    result["co2_change"] = carbon_to_co2e(
        result["carbon_change"], constants.co2_per_carbon
    )

    return result.sort_values(["date", "species"]).reset_index(drop=True)


# ============================================================================
# Summaries
# ============================================================================


def summarize_series(
    df: pd.DataFrame,
    value_col: str,
    date_col: str = "date",
    zero_baseline_nan: bool = False,
) -> dict:
    """
    Initial, final, change and percent change of a time series.

    Args:
        df: DataFrame holding the series (one row per date)
        value_col: Column to summarize
        date_col: Column giving chronological order
        zero_baseline_nan: Report a NaN percent change instead of raising
            when the initial value is zero

    Returns:
        Dict with initial, final, change, percent_change

    Raises:
        ValueError: If df is empty
        ZeroBaselineError: If the initial value is exactly zero and
            zero_baseline_nan is False
    """
    if len(df) == 0:
        raise ValueError(f"Cannot summarize empty series '{value_col}'")

    ordered = df.sort_values(date_col)
    initial = float(ordered[value_col].iloc[0])
    final = float(ordered[value_col].iloc[-1])

    pct = percent_change_or_nan if zero_baseline_nan else percent_change

    return {
        "initial": initial,
        "final": final,
        "change": final - initial,
        "percent_change": pct(initial, final),
    }


def component_summary(biomass: pd.DataFrame) -> pd.DataFrame:
    """
    First/last value of each biomass component per species.

    Components starting at zero (e.g. foliage of a deciduous species planted
    in winter) get a NaN percent change.

    Returns:
        DataFrame with species, variable, initial, final, change, percent_change
    """
    rows = []
    for (species, variable), group in biomass.groupby(["species", "variable"]):
        summary = summarize_series(group, "value", zero_baseline_nan=True)
        rows.append({"species": species, "variable": variable, **summary})

    return pd.DataFrame(
        rows,
        columns=["species", "variable", "initial", "final", "change", "percent_change"],
    )


def carbon_by_component(
    components: pd.DataFrame,
    years: float,
    constants: CarbonConstants | None = None,
) -> pd.DataFrame:
    """
    Carbon sequestered by each biomass component over the simulation.

    Args:
        components: Output of component_summary()
        years: Simulation length used for annual rates

    Returns:
        DataFrame with species, variable, carbon_sequestered, co2_equivalent,
        annual_co2_equivalent
    """
    constants = constants or CarbonConstants()

    if years <= 0:
        raise ValueError(f"years must be positive, got {years}")

    result = components[["species", "variable"]].copy()
    result["carbon_sequestered"] = biomass_to_carbon(
        components["change"], constants.carbon_fraction
    )
    result["co2_equivalent"] = carbon_to_co2e(
        result["carbon_sequestered"], constants.co2_per_carbon
    )
    result["annual_co2_equivalent"] = result["co2_equivalent"] / years
    return result


def carbon_sequestration_table(
    stand_df: pd.DataFrame,
    years: float,
    constants: CarbonConstants | None = None,
) -> pd.DataFrame:
    """
    Stand-level carbon sequestration metrics over the simulation.

    Returns:
        Two-column DataFrame (Metric, Value)
    """
    constants = constants or CarbonConstants()

    if years <= 0:
        raise ValueError(f"years must be positive, got {years}")

    ordered = stand_df.sort_values("date")
    change = float(
        ordered["stand_biomass_ha"].iloc[-1] - ordered["stand_biomass_ha"].iloc[0]
    )
    carbon = biomass_to_carbon(change, constants.carbon_fraction)
    co2e = carbon_to_co2e(carbon, constants.co2_per_carbon)

    return pd.DataFrame(
        {
            "Metric": [
                "Total biomass increase (Mg/ha)",
                "Carbon sequestered (Mg C/ha)",
                "CO2 equivalent (Mg CO2/ha)",
                "CO2 equivalent per year (Mg CO2/ha/yr)",
            ],
            "Value": [change, carbon, co2e, co2e / years],
        }
    )


def summarize_variables(output: pd.DataFrame, variables: list[str]) -> pd.DataFrame:
    """
    Initial/final summary of arbitrary model variables per species.

    Variables whose initial value is zero get a NaN percent change.

    Returns:
        DataFrame with species, variable, initial_value, final_value, change,
        percent_change (rounded to 1 decimal)
    """
    rows = []
    selected = get_variables(output, variables)

    for (species, variable), group in selected.groupby(["species", "variable"]):
        ordered = group.sort_values("date")
        initial = float(ordered["value"].iloc[0])
        final = float(ordered["value"].iloc[-1])
        pct = round(percent_change_or_nan(initial, final), 1)
        rows.append(
            {
                "species": species,
                "variable": variable,
                "initial_value": initial,
                "final_value": final,
                "change": final - initial,
                "percent_change": pct,
            }
        )

    return pd.DataFrame(
        rows,
        columns=[
            "species",
            "variable",
            "initial_value",
            "final_value",
            "change",
            "percent_change",
        ],
    )


def aggregate_results(
    output: pd.DataFrame,
    site: SiteConfig,
    constants: CarbonConstants | None = None,
) -> dict[str, Any]:
    """
    Run every biomass/carbon aggregation on a model output.

    Args:
        output: Long-form model output
        site: Site configuration (simulation length for annual rates)
        constants: Carbon conversion constants

    Returns:
        Dictionary with:
            - biomass: Component rows
            - species_biomass, stand_biomass
            - stand_carbon, species_carbon
            - biomass_change: Step-to-step changes per species
            - component_summary, carbon_by_component
            - carbon_sequestration: Stand-level metrics table
            - stand_summary: summarize_series() of stand biomass

    Raises:
        ValueError: If the output has no biomass rows
        ZeroBaselineError: If the stand starts with no biomass at all
    """
    constants = constants or CarbonConstants()

    biomass = extract_biomass(output)
    if len(biomass) == 0:
        raise ValueError(f"Model output has no biomass variables {BIOMASS_COMPONENTS}")

    per_species = species_biomass(biomass)
    stand = stand_biomass(per_species)
    components = component_summary(biomass)

    return {
        "biomass": biomass,
        "species_biomass": per_species,
        "stand_biomass": stand,
        "stand_carbon": stand_carbon(stand, constants),
        "species_carbon": species_carbon(per_species, constants),
        "biomass_change": biomass_change_by_step(per_species, constants),
        "component_summary": components,
        "carbon_by_component": carbon_by_component(components, site.num_years, constants),
        "carbon_sequestration": carbon_sequestration_table(
            stand, site.num_years, constants
        ),
        "stand_summary": summarize_series(stand, "stand_biomass_ha"),
    }
