#!/usr/bin/env python
"""
Single-species biomass and carbon sequestration on synthetic climate.

Edit the values in main() to change the site, the species or the outputs.

Outputs (in OUTPUT_DIR):
    biomass_results.csv, monthly_biomass_change.csv,
    carbon_sequestration.csv, carbon_by_component.csv
    total_biomass_over_time.png, biomass_components_over_time.png,
    carbon_over_time.png, co2_equivalent_over_time.png,
    monthly_co2_sequestration.png

Usage:
    python scripts/biomass_only.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import threepg_tools as tpg
from threepg_tools.reporting import print_biomass_summary


OUTPUT_DIR = Path("outputs/biomass_only")


def main():
    """Run the single-species projection and export biomass/carbon tables."""

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

    results = tpg.run_script(
        tpg.run_synthetic_pipeline,
        site=site,
        species=species,
        output_dir=OUTPUT_DIR,
        candidates=[tpg.SINGLE_SPECIES_SETTINGS, tpg.ALTERNATE_SETTINGS],
        csv_files={
            "biomass": "biomass_results.csv",
            "biomass_change": "monthly_biomass_change.csv",
            "carbon_sequestration": "carbon_sequestration.csv",
            "carbon_by_component": "carbon_by_component.csv",
        },
        plot_files={
            "stand_biomass": "total_biomass_over_time.png",
            "biomass_components": "biomass_components_over_time.png",
            "stand_carbon_ha": "carbon_over_time.png",
            "co2_equivalent": "co2_equivalent_over_time.png",
            "monthly_co2": "monthly_co2_sequestration.png",
        },
    )

    print(f"\nSettings used: {results['settings'].label()}")
    print_biomass_summary(results)

    print("\nResults saved:")
    for path in results["csv_files"] + results["plot_files"]:
        print(f"- {path}")


if __name__ == "__main__":
    main()
