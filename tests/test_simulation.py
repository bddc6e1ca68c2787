"""
Unit tests for growth-model invocation and configuration fallback.

Fake growth models stand in for r3PG so no R installation is needed.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from threepg_tools.climate import generate_synthetic_climate
from threepg_tools.config import (
    ALTERNATE_SETTINGS,
    DEFAULT_CANDIDATES,
    PRIMARY_SETTINGS,
    SINGLE_SPECIES_SETTINGS,
    ModelRunOptions,
    SiteConfig,
    SpeciesState,
)
from threepg_tools.simulation import (
    DIAGNOSTICS,
    ModelRunError,
    RScriptGrowthModel,
    format_diagnostics,
    run_growth_model,
)


@pytest.fixture
def site():
    return SiteConfig(latitude=47.5, altitude=300, start="2021-01", end="2021-12")


@pytest.fixture
def climate():
    return generate_synthetic_climate("2021-01", "2021-12")


@pytest.fixture
def species():
    return [
        SpeciesState(
            name="Pinus sylvestris",
            planted="2020-01",
            fertility=0.6,
            stems_n=1000,
            biom_stem=10.0,
            biom_root=3.0,
            biom_foliage=2.0,
        )
    ]


def _output():
    return pd.DataFrame(
        {
            "date": pd.to_datetime(["2021-01-31"]),
            "species": ["Pinus sylvestris"],
            "group": ["biomass"],
            "variable": ["biom_stem"],
            "value": [10.0],
        }
    )


class RecordingModel:
    """Fake growth model failing for the given settings."""

    def __init__(self, failing=(), result=None):
        self.failing = set(failing)
        self.result = _output() if result is None else result
        self.calls = []

    def __call__(self, site, climate, species, settings):
        self.calls.append(settings)
        if settings in self.failing:
            raise RuntimeError(f"numerical failure with {settings.label()}")
        return self.result


class TestRunGrowthModel:
    """Tests for run_growth_model."""

    def test_primary_success(self, site, climate, species):
        model = RecordingModel()
        output, settings = run_growth_model(site, climate, species, model)

        assert settings == PRIMARY_SETTINGS
        assert model.calls == [PRIMARY_SETTINGS]
        assert len(output) == 1

    def test_fallback_invoked_exactly_once(self, site, climate, species, capsys):
        model = RecordingModel(failing=[PRIMARY_SETTINGS])
        output, settings = run_growth_model(site, climate, species, model)

        assert settings == ALTERNATE_SETTINGS
        assert model.calls == [PRIMARY_SETTINGS, ALTERNATE_SETTINGS]

        captured = capsys.readouterr().out
        assert "Attempt 1 failed with error" in captured
        assert "Trying alternative settings..." in captured

    def test_all_fail(self, site, climate, species):
        model = RecordingModel(failing=DEFAULT_CANDIDATES)

        with pytest.raises(ModelRunError) as exc_info:
            run_growth_model(site, climate, species, model)

        error = exc_info.value
        assert len(error.attempts) == 2
        assert [s for s, _ in error.attempts] == list(DEFAULT_CANDIDATES)
        assert "numerical failure" in error.attempts[0][1]
        assert error.diagnostics == DIAGNOSTICS
        assert model.calls == list(DEFAULT_CANDIDATES)

    def test_empty_output_counts_as_failure(self, site, climate, species):
        class EmptyThenOutput:
            def __init__(self):
                self.calls = 0

            def __call__(self, site, climate, species, settings):
                self.calls += 1
                return _output().iloc[0:0] if self.calls == 1 else _output()

        model = EmptyThenOutput()
        _, settings = run_growth_model(site, climate, species, model)

        assert settings == ALTERNATE_SETTINGS
        assert model.calls == 2

    def test_none_output_counts_as_failure(self, site, climate, species):
        with pytest.raises(ModelRunError) as exc_info:
            run_growth_model(
                site, climate, species, lambda *args: None, [SINGLE_SPECIES_SETTINGS]
            )
        assert "no output" in exc_info.value.attempts[0][1]

    def test_custom_candidates(self, site, climate, species):
        model = RecordingModel()
        _, settings = run_growth_model(
            site, climate, species, model, [SINGLE_SPECIES_SETTINGS]
        )
        assert settings == SINGLE_SPECIES_SETTINGS

    def test_empty_candidates(self, site, climate, species):
        with pytest.raises(ValueError, match="candidates"):
            run_growth_model(site, climate, species, RecordingModel(), [])


class TestFormatDiagnostics:
    """Tests for format_diagnostics."""

    def test_lists_attempts_and_hints(self):
        error = ModelRunError(
            "All 2 model configurations failed",
            attempts=[(PRIMARY_SETTINGS, "boom"), (ALTERNATE_SETTINGS, "bang")],
        )
        text = format_diagnostics(error)

        assert "light_model=2, transp_model=1, phys_model=1] boom" in text
        assert "bang" in text
        assert "DIAGNOSTIC INFORMATION:" in text
        assert "1. Check if climate data has valid values" in text


class TestRScriptGrowthModel:
    """Tests for RScriptGrowthModel with Rscript patched out."""

    @patch("threepg_tools.simulation.run_rscript")
    def test_successful_attempt(self, mock_run, site, climate, species, tmp_path):
        def fake_run(script_file, working_dir, rscript, timeout):
            (Path(working_dir) / "output.csv").write_text(
                "date,species,group,variable,value\n"
                "2021-01-31,Pinus sylvestris,biomass,biom_stem,10.0\n"
            )
            return {"exit_code": 0, "stdout": "", "stderr": "", "success": True}

        mock_run.side_effect = fake_run
        model = RScriptGrowthModel(tmp_path, ModelRunOptions(rscript="Rscript", timeout=5))

        output = model(site, climate, species, PRIMARY_SETTINGS)

        run_dir = tmp_path / "attempt_01"
        assert (run_dir / "site.csv").exists()
        assert (run_dir / "climate.csv").exists()
        assert "light_model = 2L" in (run_dir / "run_3pg.R").read_text()
        assert mock_run.call_args[1]["timeout"] == 5
        assert list(output["value"]) == [10.0]

    @patch("threepg_tools.simulation.run_rscript")
    def test_failed_attempt(self, mock_run, site, climate, species, tmp_path):
        def fake_run(script_file, working_dir, rscript, timeout):
            (Path(working_dir) / "model.err").write_text("Error: bad climate\n")
            return {"exit_code": 1, "stdout": "", "stderr": "", "success": False}

        mock_run.side_effect = fake_run
        model = RScriptGrowthModel(tmp_path)

        with pytest.raises(ModelRunError, match="bad climate"):
            model(site, climate, species, PRIMARY_SETTINGS)

    @patch("threepg_tools.simulation.run_rscript")
    def test_attempts_use_separate_directories(
        self, mock_run, site, climate, species, tmp_path
    ):
        mock_run.return_value = {
            "exit_code": 1,
            "stdout": "",
            "stderr": "",
            "success": False,
        }
        model = RScriptGrowthModel(tmp_path)

        with pytest.raises(ModelRunError) as exc_info:
            run_growth_model(site, climate, species, model)

        assert (tmp_path / "attempt_01" / "run_3pg.R").exists()
        assert (tmp_path / "attempt_02" / "run_3pg.R").exists()
        assert "exit code 1" in exc_info.value.attempts[0][1]
