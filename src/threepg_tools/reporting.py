"""
Console summaries and CSV export of aggregated results.
"""

import math
from pathlib import Path

import pandas as pd

from .aggregation import percent_change_or_nan
from .config import CarbonConstants


def print_stand_summary(results: dict, constants: CarbonConstants | None = None) -> None:
    """
    Print initial/final stand biomass and final plot carbon.

    Args:
        results: Output of aggregate_results()
        constants: Carbon constants (plot area label)
    """
    constants = constants or CarbonConstants()
    summary = results["stand_summary"]

    print("\n=== STAND BIOMASS (per hectare) ===")
    print(f"Initial (Mg/ha): {summary['initial']:.4f}")
    print(f"Final   (Mg/ha): {summary['final']:.4f}")
    print(f"Change  (Mg/ha): {summary['change']:.4f}")

    carbon = results["stand_carbon"].sort_values("date").iloc[-1]
    n_species = results["species_biomass"]["species"].nunique()
    print(
        f"\n=== TOTAL CARBON on {constants.plot_area_acres:g} acres "
        f"({n_species} species) ==="
    )
    print(f"Final carbon (Mg C):        {carbon['total_carbon_tonnes']:.4f}")
    print(f"Final carbon (short tons C): {carbon['total_carbon_short_tons']:.4f}")


def print_biomass_summary(results: dict) -> None:
    """Print per-species biomass change, components and sequestration table."""
    per_species = results["species_biomass"]

    print("\n=== BIOMASS SUMMARY ===")
    for species, group in per_species.groupby("species"):
        ordered = group.sort_values("date")
        initial = ordered["total_biomass_ha"].iloc[0]
        final = ordered["total_biomass_ha"].iloc[-1]
        print(f"Species: {species}")
        print(f"  Initial total biomass: {initial:.2f} Mg/ha")
        print(f"  Final total biomass:   {final:.2f} Mg/ha")
        print(f"  Total biomass change:  {final - initial:.2f} Mg/ha")
        pct = percent_change_or_nan(initial, final)
        if math.isnan(pct):
            print("  Percent increase:      n/a (initial biomass is 0)")
        else:
            print(f"  Percent increase:      {pct:.1f} %")

    print("\n=== BIOMASS COMPONENTS ===")
    print(results["component_summary"].round(2).to_string(index=False))

    print("\n=== CARBON SEQUESTRATION ESTIMATES ===")
    print(results["carbon_sequestration"].round(2).to_string(index=False))

    print("\n=== CARBON SEQUESTRATION BY COMPONENT ===")
    print(results["carbon_by_component"].round(2).to_string(index=False))


def print_estimation_notice(estimated: list[str]) -> None:
    """Warn that some climate inputs were estimated rather than measured."""
    if not estimated:
        return
    print("\nNOTE: This analysis used ESTIMATED values for: " + ", ".join(estimated))
    print("Replace estimated data with measurements for a more accurate assessment.")


def export_tables(
    tables: dict[str, pd.DataFrame],
    output_dir: Path | str,
    filenames: dict[str, str],
) -> list[Path]:
    """
    Write selected tables to CSV.

    Args:
        tables: Mapping of table name to DataFrame
        output_dir: Directory for the CSV files
        filenames: Mapping of table name to CSV file name

    Returns:
        Paths of written files

    Raises:
        KeyError: If a requested table is not available
    """
    missing = [name for name in filenames if name not in tables]
    if missing:
        raise KeyError(f"Tables not available for export: {missing}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, filename in filenames.items():
        path = output_dir / filename
        tables[name].to_csv(path, index=False)
        written.append(path)

    return written
