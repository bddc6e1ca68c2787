#!/usr/bin/env python
"""
3-PG projection driven by field sensor data.

Reads raw sensor readings, aggregates them to monthly climate, fills the
variables the sensors don't measure with placeholder estimates and runs a
two-species stand over the covered months.

SAMPLE DATA: the site and species values below are fictional; replace them
with values from your own stand.

Usage:
    python scripts/sensor_pipeline.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import threepg_tools as tpg
from threepg_tools.reporting import print_stand_summary


SENSOR_FILE = Path("db-80.Cluster0.csv")
OUTPUT_DIR = Path("outputs/sensor_pipeline")


def main():
    """Run the sensor-driven projection."""

    # start/end are replaced by the months covered by the sensor data
    site = tpg.SiteConfig(
        latitude=45.5,  # REPLACE with actual site latitude
        altitude=250,  # REPLACE with actual site altitude (m)
        soil_class="sandy_loam",
        asw_i=120,
        asw_min=50,
        asw_max=200,
        start="2000-01",
        end="2000-01",
    )

    species = [
        tpg.SpeciesState(
            name="Sample_Pine",
            parameter_species="Pinus sylvestris",
            planted="2000-01",
            fertility=0.7,
            stems_n=700,
            biom_stem=8,
            biom_root=2.5,
            biom_foliage=1.5,
        ),
        tpg.SpeciesState(
            name="Sample_Hardwood",
            parameter_species="Fagus sylvatica",
            planted="2000-01",
            fertility=0.6,
            stems_n=300,
            biom_stem=6,
            biom_root=2,
            biom_foliage=1,
        ),
    ]

    constants = tpg.CarbonConstants(plot_area_acres=0.1)

    results = tpg.run_script(
        tpg.run_sensor_pipeline,
        sensor_file=SENSOR_FILE,
        site=site,
        species=species,
        output_dir=OUTPUT_DIR,
        constants=constants,
    )

    print("\nSummary of prepared climate data for 3-PG:")
    print(results["climate"].describe().round(2).to_string())

    print_stand_summary(results, constants)

    print("\n=== Analysis Complete ===")
    print(f"Results and plots saved to {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
