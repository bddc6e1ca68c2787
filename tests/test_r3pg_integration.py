"""
Integration tests running the real r3PG model through Rscript.

These tests need R with the r3PG package installed and are skipped otherwise.
They are slower than the unit tests and should be run separately:

    uv run pytest tests/test_r3pg_integration.py -v

Use markers to skip in regular test runs:
    uv run pytest tests/ -m "not integration"
"""

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import threepg_tools as tpg
from threepg_tools.config import DEFAULT_RSCRIPT


def _r3pg_available() -> bool:
    rscript = shutil.which(str(DEFAULT_RSCRIPT))
    if rscript is None:
        return False
    result = subprocess.run(
        [rscript, "--vanilla", "-e", "library(r3PG)"],
        capture_output=True,
        text=True,
    )
    return result.returncode == 0


# Mark all tests in this module as integration tests
pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not _r3pg_available(), reason="R package r3PG not installed"),
]


@pytest.fixture(scope="module")
def output_base(tmp_path_factory):
    """Create a temporary output directory."""
    return tmp_path_factory.mktemp("r3pg_integration")


def test_single_species_run(output_base):
    """Pinus sylvestris on three years of synthetic climate."""
    site = tpg.SiteConfig(latitude=47.5, altitude=300, start="2021-01", end="2023-12")
    species = [
        tpg.SpeciesState(
            name="Pinus sylvestris",
            planted="2020-01",
            fertility=0.6,
            stems_n=1000,
            biom_stem=10.0,
            biom_root=3.0,
            biom_foliage=2.0,
        )
    ]

    results = tpg.run_synthetic_pipeline(
        site,
        species,
        output_base / "single",
        candidates=[tpg.SINGLE_SPECIES_SETTINGS, tpg.ALTERNATE_SETTINGS],
        plot_files={},
    )

    assert results["stand_summary"]["initial"] > 0
    assert len(results["stand_biomass"]) > 0
    assert (output_base / "single" / "r3pg_runs" / "attempt_01" / "run_3pg.R").exists()


def test_two_species_stand(output_base):
    """Evergreen Pinus sylvestris with deciduous Fagus sylvatica planted in winter."""
    site = tpg.SiteConfig(latitude=45.5, altitude=250, start="2021-01", end="2023-12")
    species = [
        tpg.SpeciesState(
            name="Pinus sylvestris",
            planted="2021-01",
            fertility=0.7,
            stems_n=700,
            biom_stem=8.0,
            biom_root=2.5,
            biom_foliage=1.5,
        ),
        tpg.SpeciesState(
            name="Fagus sylvatica",
            planted="2021-01",
            fertility=0.6,
            stems_n=300,
            biom_stem=6.0,
            biom_root=2.0,
            biom_foliage=0.0,
        ),
    ]

    results = tpg.run_synthetic_pipeline(
        site,
        species,
        output_base / "mixed",
        constants=tpg.CarbonConstants(plot_area_acres=0.1),
        plot_files={},
    )

    assert set(results["species_biomass"]["species"]) == {
        "Pinus sylvestris",
        "Fagus sylvatica",
    }
    assert (output_base / "mixed" / "stand_carbon.csv").exists()
    assert results["stand_carbon"]["total_carbon_short_tons"].notna().all()
