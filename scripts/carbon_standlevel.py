#!/usr/bin/env python
"""
Two-species stand: biomass per species, stand carbon per hectare and for a
0.1 acre plot in metric tonnes and short tons.

Usage:
    python scripts/carbon_standlevel.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import threepg_tools as tpg
from threepg_tools.reporting import print_stand_summary


OUTPUT_DIR = Path("outputs/carbon_standlevel")
PLOT_AREA_ACRES = 0.1


def main():
    """Run the two-species projection and export stand-level carbon."""

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
            stems_n=700,
            biom_stem=8,
            biom_root=2.5,
            biom_foliage=1.5,
        ),
        tpg.SpeciesState(
            name="Fagus sylvatica",
            planted="2021-01",
            fertility=0.6,  # Slightly less fertile conditions
            stems_n=300,
            biom_stem=6,
            biom_root=2,
            biom_foliage=1,
        ),
    ]

    constants = tpg.CarbonConstants(plot_area_acres=PLOT_AREA_ACRES)

    results = tpg.run_script(
        tpg.run_synthetic_pipeline,
        site=site,
        species=species,
        output_dir=OUTPUT_DIR,
        constants=constants,
        csv_files={
            "species_biomass": "species_biomass_per_ha.csv",
            "stand_biomass": "stand_biomass_per_ha.csv",
            "stand_carbon": f"stand_carbon_{PLOT_AREA_ACRES}_acres.csv",
        },
        plot_files={
            "plot_carbon_short_tons": (
                f"total_carbon_over_time_{PLOT_AREA_ACRES}_acres_short_tons.png"
            ),
            "species_carbon": "carbon_over_time_by_species_per_ha.png",
        },
    )

    print_stand_summary(results, constants)

    print("\n=== Model Run Complete ===")
    print(f"Plots and CSVs saved to {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
