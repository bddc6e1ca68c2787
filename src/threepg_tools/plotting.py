"""
Charts of biomass and carbon trajectories.

Each chart builder takes the aggregated results dict and returns a matplotlib
Figure; save_plots() renders a selection of them to PNG.
"""

from collections.abc import Callable
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from .aggregation import COMPONENT_LABELS  # noqa: E402


FIGSIZE = (8, 5)


def plot_series(
    df: pd.DataFrame,
    y: str,
    title: str,
    ylabel: str,
    color: str = "forestgreen",
    marker_color: str = "darkgreen",
    subtitle: str | None = None,
) -> plt.Figure:
    """Line-and-point chart of one column against date."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    ax.plot(df["date"], df[y], color=color, linewidth=1.5)
    ax.scatter(df["date"], df[y], color=marker_color, s=12, zorder=3)
    _style(ax, title, ylabel, subtitle)
    return fig


def plot_by_group(
    df: pd.DataFrame,
    y: str,
    group: str,
    title: str,
    ylabel: str,
    labels: dict[str, str] | None = None,
    subtitle: str | None = None,
) -> plt.Figure:
    """One line per group (species or biomass component) against date."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    for name, part in df.groupby(group, sort=True):
        label = labels.get(name, name) if labels else name
        part = part.sort_values("date")
        ax.plot(part["date"], part[y], marker="o", markersize=3, linewidth=1.5, label=label)
    ax.legend(title=group.capitalize())
    _style(ax, title, ylabel, subtitle)
    return fig


def plot_bars(
    df: pd.DataFrame,
    y: str,
    title: str,
    ylabel: str,
    color: str = "purple",
) -> plt.Figure:
    """Bar chart of a per-step quantity against date."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    ax.bar(df["date"], df[y], width=20, color=color, alpha=0.7)
    _style(ax, title, ylabel)
    return fig


def _style(ax, title: str, ylabel: str, subtitle: str | None = None) -> None:
    ax.set_title(f"{title}\n{subtitle}" if subtitle else title, fontweight="bold")
    ax.set_xlabel("Date")
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3)
    ax.figure.autofmt_xdate()
    ax.figure.tight_layout()


# ============================================================================
# Named Charts
# ============================================================================


def _stand_biomass(results: dict) -> plt.Figure:
    return plot_series(
        results["stand_biomass"],
        "stand_biomass_ha",
        "Total Stand Biomass Over Time",
        "Biomass (Mg/ha)",
    )


def _species_biomass(results: dict) -> plt.Figure:
    return plot_by_group(
        results["species_biomass"],
        "total_biomass_ha",
        "species",
        "Species-Specific Biomass Over Time",
        "Biomass (Mg/ha)",
    )


def _biomass_components(results: dict) -> plt.Figure:
    return plot_by_group(
        results["biomass"],
        "value",
        "variable",
        "Biomass Components Over Time",
        "Biomass (Mg/ha)",
        labels=COMPONENT_LABELS,
    )


def _stand_carbon_ha(results: dict) -> plt.Figure:
    return plot_series(
        results["stand_carbon"],
        "stand_carbon_ha",
        "Carbon Sequestered Over Time",
        "Carbon (Mg C/ha)",
        color="steelblue",
        marker_color="navy",
    )


def _plot_carbon_tonnes(results: dict) -> plt.Figure:
    return plot_series(
        results["stand_carbon"],
        "total_carbon_tonnes",
        "Total Carbon Over Time (plot)",
        "Carbon (metric tonnes)",
        color="blue",
        marker_color="darkblue",
    )


def _plot_carbon_short_tons(results: dict) -> plt.Figure:
    return plot_series(
        results["stand_carbon"],
        "total_carbon_short_tons",
        "Total Carbon Over Time (plot)",
        "Carbon (short tons)",
        color="blue",
        marker_color="darkblue",
    )


def _species_carbon(results: dict) -> plt.Figure:
    return plot_by_group(
        results["species_carbon"],
        "carbon_ha",
        "species",
        "Species-Specific Carbon Over Time (Mg C/ha)",
        "Carbon (Mg C/ha)",
    )


def _co2_equivalent(results: dict) -> plt.Figure:
    return plot_by_group(
        results["species_carbon"],
        "co2e_ha",
        "species",
        "CO2 Equivalent Over Time",
        "CO2 equivalent (Mg CO2/ha)",
    )


def _monthly_co2(results: dict) -> plt.Figure:
    change = results["biomass_change"].dropna(subset=["co2_change"])
    per_date = change.groupby("date", as_index=False)["co2_change"].sum()
    return plot_bars(
        per_date,
        "co2_change",
        "Monthly CO2 Sequestration Rate",
        "CO2 sequestered (Mg CO2/ha/month)",
    )


CHARTS: dict[str, Callable[[dict], plt.Figure]] = {
    "stand_biomass": _stand_biomass,
    "species_biomass": _species_biomass,
    "biomass_components": _biomass_components,
    "stand_carbon_ha": _stand_carbon_ha,
    "plot_carbon_tonnes": _plot_carbon_tonnes,
    "plot_carbon_short_tons": _plot_carbon_short_tons,
    "species_carbon": _species_carbon,
    "co2_equivalent": _co2_equivalent,
    "monthly_co2": _monthly_co2,
}


def save_plots(
    results: dict, output_dir: Path | str, filenames: dict[str, str]
) -> list[Path]:
    """
    Render named charts to PNG.

    Args:
        results: Output of aggregate_results()
        output_dir: Directory for the PNG files
        filenames: Mapping of chart name (key of CHARTS) to file name

    Returns:
        Paths of written files

    Raises:
        ValueError: If a chart name is unknown
    """
    unknown = [name for name in filenames if name not in CHARTS]
    if unknown:
        raise ValueError(f"Unknown charts: {unknown}. Valid charts: {sorted(CHARTS)}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, filename in filenames.items():
        fig = CHARTS[name](results)
        path = output_dir / filename
        fig.savefig(path, dpi=100)
        plt.close(fig)
        written.append(path)

    return written
