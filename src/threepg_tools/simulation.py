"""
Growth-model invocation with configuration fallback.

A growth model is any callable

    model(site, climate, species, settings) -> long-form output DataFrame

RScriptGrowthModel is the real one (r3PG through Rscript). run_growth_model()
tries an ordered list of ModelSettings candidates and returns the first
successful result.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

import pandas as pd

from .config import (
    DEFAULT_CANDIDATES,
    ModelRunOptions,
    ModelSettings,
    SiteConfig,
    SpeciesState,
)
from .driver_builder import OUTPUT_FILE, build_driver_script
from .model_input import write_model_inputs
from .output_parser import parse_model_output
from .runner import check_model_errors, run_rscript


GrowthModel = Callable[
    [SiteConfig, pd.DataFrame, list[SpeciesState], ModelSettings], pd.DataFrame
]

DIAGNOSTICS = [
    "Check if climate data has valid values for all required variables",
    "Ensure the site start/end months are covered by the climate data",
    "Verify species parameters are within acceptable ranges",
]


class ModelRunError(RuntimeError):
    """
    Raised when every configuration candidate failed.

    Attributes:
        attempts: List of (settings, error message) in the order tried
        diagnostics: Suggested checks for the user
    """

    def __init__(
        self,
        message: str,
        attempts: list[tuple[ModelSettings, str]] | None = None,
        diagnostics: list[str] | None = None,
    ):
        super().__init__(message)
        self.attempts = attempts or []
        self.diagnostics = diagnostics if diagnostics is not None else list(DIAGNOSTICS)


class RScriptGrowthModel:
    """
    r3PG growth model run through Rscript.

    Each call gets its own attempt directory under ``work_dir`` holding the
    input CSVs, the generated driver, R's stdout/stderr and output.csv.
    """

    def __init__(
        self,
        work_dir: Path | str,
        options: ModelRunOptions | None = None,
    ):
        self.work_dir = Path(work_dir)
        self.options = options or ModelRunOptions()
        self._attempt = 0

    def __call__(
        self,
        site: SiteConfig,
        climate: pd.DataFrame,
        species: list[SpeciesState],
        settings: ModelSettings,
    ) -> pd.DataFrame:
        self._attempt += 1
        run_dir = self.work_dir / f"attempt_{self._attempt:02d}"

        write_model_inputs(site, climate, species, run_dir)

        script_file = run_dir / "run_3pg.R"
        build_driver_script(settings, script_file, check_input=self.options.check_input)

        result = run_rscript(
            script_file, run_dir, self.options.rscript, timeout=self.options.timeout
        )

        if not result["success"]:
            errors = check_model_errors(run_dir)
            detail = "; ".join(errors) if errors else f"exit code {result['exit_code']}"
            raise ModelRunError(f"r3PG failed ({settings.label()}): {detail}")

        return parse_model_output(run_dir / OUTPUT_FILE)


def run_growth_model(
    site: SiteConfig,
    climate: pd.DataFrame,
    species: list[SpeciesState],
    model: GrowthModel | None = None,
    candidates: Sequence[ModelSettings] = DEFAULT_CANDIDATES,
) -> tuple[pd.DataFrame, ModelSettings]:
    """
    Run the growth model, falling back through configuration candidates.

    Any exception from the model, or an empty result, counts as a failed
    attempt. Attempts run sequentially and stop at the first success.

    Args:
        site: Site configuration
        climate: Model-ready climate table
        species: Species in the stand
        model: Growth model callable (defaults to RScriptGrowthModel in a
            timestamped directory under ./outputs)
        candidates: Settings to try, in order

    Returns:
        Tuple of (model output, settings that succeeded)

    Raises:
        ValueError: If no candidates are given
        ModelRunError: If every candidate failed
    """
    if len(candidates) == 0:
        raise ValueError("candidates cannot be empty")

    if model is None:
        run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        model = RScriptGrowthModel(Path("outputs") / f"r3pg_{run_id}")

    attempts = []

    for i, settings in enumerate(candidates, start=1):
        print(f"Running 3-PG (attempt {i}/{len(candidates)}: {settings.label()})...")

        try:
            output = model(site, climate, species, settings)
            if output is None or len(output) == 0:
                raise ValueError("model returned no output")
        except Exception as e:
            print(f"Attempt {i} failed with error: {e}", flush=True)
            attempts.append((settings, str(e)))
            if i < len(candidates):
                print("Trying alternative settings...")
            continue

        return output, settings

    raise ModelRunError(
        f"All {len(candidates)} model configurations failed",
        attempts=attempts,
    )


def format_diagnostics(error: ModelRunError) -> str:
    """Human-readable failure report for a ModelRunError."""
    lines = [str(error)]
    for settings, message in error.attempts:
        lines.append(f"  [{settings.label()}] {message}")
    lines.append("")
    lines.append("DIAGNOSTIC INFORMATION:")
    for i, hint in enumerate(error.diagnostics, start=1):
        lines.append(f"{i}. {hint}")
    return "\n".join(lines)
