"""
r3PG output parser.

Reads the long-form table written by run_3PG(df_out = TRUE).
"""

from pathlib import Path

import pandas as pd


OUTPUT_COLUMNS = ["date", "species", "group", "variable", "value"]


def parse_model_output(csv_path: Path | str) -> pd.DataFrame:
    """
    Parse r3PG long-form output.

    Args:
        csv_path: Path to output.csv

    Returns:
        DataFrame with date (datetime64), species, group, variable, value

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If required columns are missing
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"r3PG output not found: {csv_path}")

    df = pd.read_csv(csv_path)

    # 'group' is informational; older r3PG releases may not write it
    if "group" not in df.columns:
        df["group"] = pd.NA

    missing = [col for col in OUTPUT_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"r3PG output missing required columns: {missing}")

    df = df[OUTPUT_COLUMNS].copy()
    df["date"] = pd.to_datetime(df["date"])
    df["value"] = pd.to_numeric(df["value"], errors="coerce")

    return df.sort_values(["date", "species", "variable"]).reset_index(drop=True)


def get_variables(output: pd.DataFrame, variables: list[str]) -> pd.DataFrame:
    """
    Filter model output to the given variables.

    Args:
        output: Parsed model output
        variables: Variable names (e.g. ["biom_stem", "dbh"])

    Returns:
        Matching rows; empty DataFrame if none match
    """
    return output[output["variable"].isin(variables)].reset_index(drop=True)


def list_variables(output: pd.DataFrame) -> list[str]:
    """Sorted variable names reported in the model output."""
    return sorted(output["variable"].unique().tolist())
