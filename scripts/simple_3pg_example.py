#!/usr/bin/env python
"""
Minimal 3-PG example: one species on synthetic climate.

Runs r3PG once with the single-species settings and prints a growth and
carbon summary. Nothing is written to disk apart from the r3PG run folder.

Usage:
    python scripts/simple_3pg_example.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import threepg_tools as tpg
from threepg_tools.output_parser import list_variables


KEY_VARIABLES = ["stems_n", "height", "dbh", "biom_stem", "biom_root", "biom_foliage"]


def main():
    """Run a single-species projection and print the growth summary."""

    site = tpg.SiteConfig(
        latitude=45.5,
        altitude=250,
        soil_class="sandy_loam",
        asw_i=120,
        asw_min=50,
        asw_max=200,
        start="2021-01",
        end="2023-12",
    )

    species = [
        tpg.SpeciesState(
            name="Pinus sylvestris",
            planted="2021-01",
            fertility=0.7,
            stems_n=1000,
            biom_stem=10,
            biom_root=3,
            biom_foliage=2,
        )
    ]

    print(f"- Site location: Latitude {site.latitude}°, Altitude {site.altitude} m")
    print(f"- Simulation period: {site.start} to {site.end}")
    print(f"- Tree species: {species[0].name}")
    print(f"- Initial stems per hectare: {species[0].stems_n}")
    print()

    results = tpg.run_script(
        tpg.run_synthetic_pipeline,
        site=site,
        species=species,
        output_dir=Path("outputs/simple_example"),
        candidates=[tpg.SINGLE_SPECIES_SETTINGS],
        csv_files={},
        plot_files={},
    )

    output = results["model_output"]
    print(f"\nr3PG reported {len(list_variables(output))} variables")

    print("\n=== GROWTH SUMMARY ===")
    print(tpg.summarize_variables(output, KEY_VARIABLES).to_string(index=False))

    summary = results["stand_summary"]
    biomass_change = summary["change"]
    carbon_change = tpg.biomass_to_carbon(biomass_change)
    co2_equivalent = tpg.carbon_to_co2e(carbon_change)

    print("\n=== CARBON SUMMARY ===")
    print(f"Initial total biomass: {summary['initial']:.2f} Mg/ha")
    print(f"Final total biomass:   {summary['final']:.2f} Mg/ha")
    print(f"Biomass increase:      {biomass_change:.2f} Mg/ha")
    print(f"Carbon sequestered:    {carbon_change:.2f} Mg C/ha")
    print(f"CO2 equivalent:        {co2_equivalent:.2f} Mg CO2/ha")

    print("\nModel run complete! For more detailed analysis, see scripts/biomass_only.py")


if __name__ == "__main__":
    main()
