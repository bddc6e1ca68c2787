"""
Rscript execution wrapper.

Handles running a generated r3PG driver script and capturing outputs.
"""

import shutil
import subprocess
from pathlib import Path

from .config import DEFAULT_TIMEOUT
from .driver_builder import OUTPUT_FILE


def resolve_rscript(rscript: Path | str) -> Path:
    """
    Locate the Rscript executable.

    Bare names (e.g. "Rscript") are looked up on PATH.

    Raises:
        FileNotFoundError: If the executable cannot be found
    """
    rscript = Path(rscript)

    if rscript.exists():
        return rscript

    found = shutil.which(str(rscript))
    if found is None:
        raise FileNotFoundError(
            f"Rscript not found: {rscript} (set R3PG_RSCRIPT or add R to PATH)"
        )
    return Path(found)


def run_rscript(
    script_file: Path | str,
    working_dir: Path | str,
    rscript: Path | str,
    timeout: int = DEFAULT_TIMEOUT,
) -> dict:
    """
    Run an R driver script in its working directory.

    Args:
        script_file: Path to the generated driver script
        working_dir: Directory holding the input CSVs (outputs are written here)
        rscript: Path or name of the Rscript executable
        timeout: Maximum execution time in seconds

    Returns:
        Dictionary with:
            - exit_code: Rscript exit code (0 = success)
            - stdout: Standard output text
            - stderr: Standard error text
            - success: True if R exited cleanly and wrote the output CSV

    Raises:
        subprocess.TimeoutExpired: If execution exceeds timeout
        FileNotFoundError: If Rscript or the script file is not found
    """
    script_file = Path(script_file)
    working_dir = Path(working_dir)

    if not script_file.exists():
        raise FileNotFoundError(f"Driver script not found: {script_file}")

    rscript = resolve_rscript(rscript)

    if not working_dir.exists():
        working_dir.mkdir(parents=True, exist_ok=True)

    # Remove stale output so a failed attempt can't be mistaken for success
    output_file = working_dir / OUTPUT_FILE
    if output_file.exists():
        output_file.unlink()

    result = subprocess.run(
        [str(rscript), "--vanilla", str(script_file.resolve())],
        capture_output=True,
        text=True,
        cwd=working_dir,
        timeout=timeout,
    )

    (working_dir / "model.out").write_text(result.stdout)
    (working_dir / "model.err").write_text(result.stderr)

    return {
        "exit_code": result.returncode,
        "stdout": result.stdout,
        "stderr": result.stderr,
        "success": result.returncode == 0 and output_file.exists(),
    }


def check_model_errors(working_dir: Path | str) -> list[str]:
    """
    Collect error and warning lines written by R.

    Args:
        working_dir: Directory containing run outputs

    Returns:
        List of messages (empty if none). Package start-up chatter is skipped.
    """
    working_dir = Path(working_dir)
    err_file = working_dir / "model.err"

    if not err_file.exists():
        return []

    content = err_file.read_text().strip()
    if not content:
        return []

    lines = [line.strip() for line in content.splitlines() if line.strip()]

    # Keep lines from the first error/warning onwards
    for i, line in enumerate(lines):
        if line.startswith(("Error", "Warning")):
            return lines[i:]

    return lines


def get_model_output_files(working_dir: Path | str) -> dict[str, Path]:
    """
    Locate files of an r3PG run.

    Returns:
        Dictionary mapping file types to existing paths:
            - output: output.csv
            - stdout: model.out
            - stderr: model.err
            - script: run_3pg.R (if exists)
    """
    working_dir = Path(working_dir)

    files = {
        "output": working_dir / OUTPUT_FILE,
        "stdout": working_dir / "model.out",
        "stderr": working_dir / "model.err",
        "script": working_dir / "run_3pg.R",
    }

    return {k: v for k, v in files.items() if v.exists()}
