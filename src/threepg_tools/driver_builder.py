"""
R driver script builder.

Generates the small R program that loads the input CSVs written by
model_input.write_model_inputs(), calls r3PG::run_3PG() with the requested
settings and writes the long-form output to CSV.

Key principle: the driver never modifies the inputs beyond type coercion.
Species physiology comes from r3PG's bundled d_parameters table; each species
row is matched to a parameter column through parameter_map.csv.
"""

from pathlib import Path

from .config import ModelSettings
from .model_input import CLIMATE_FILE, PARAMETER_MAP_FILE, SITE_FILE, SPECIES_FILE


OUTPUT_FILE = "output.csv"


def _r_settings(settings: ModelSettings) -> str:
    """Render settings as an R list literal with integer values."""
    items = [f"{name} = {value}L" for name, value in settings.as_dict().items()]
    return "list(" + ", ".join(items) + ")"


def build_driver_script(
    settings: ModelSettings,
    filepath: Path | str,
    check_input: bool = True,
    output_filename: str = OUTPUT_FILE,
) -> str:
    """
    Generate the R driver script for one r3PG attempt.

    Args:
        settings: Numerical-method configuration for this attempt
        filepath: Output path for the script (inputs are read from its directory)
        check_input: Pass check_input = TRUE to run_3PG
        output_filename: Name of the CSV the driver writes

    Returns:
        The script text (also written to filepath)
    """
    filepath = Path(filepath)

    lines = []

    lines.append(f"# Generated for settings: {settings.label()}")
    lines.append("suppressPackageStartupMessages(library(r3PG))")
    lines.append("")

    # Inputs (character columns stay character: 'from', 'to', 'planted')
    lines.append(f'site <- read.csv("{SITE_FILE}", stringsAsFactors = FALSE)')
    lines.append(f'climate <- read.csv("{CLIMATE_FILE}", stringsAsFactors = FALSE)')
    lines.append(f'species <- read.csv("{SPECIES_FILE}", stringsAsFactors = FALSE)')
    lines.append(
        f'param_map <- read.csv("{PARAMETER_MAP_FILE}", stringsAsFactors = FALSE)'
    )
    lines.append("")

    # Parameter table: one column per modelled species
    lines.append('parameters <- data.frame(parameter = d_parameters$parameter)')
    lines.append("for (i in seq_len(nrow(param_map))) {")
    lines.append("  source_col <- param_map$parameter_species[i]")
    lines.append("  if (!(source_col %in% names(d_parameters))) {")
    lines.append(
        '    message("No parameters for ", source_col, '
        '"; using ", names(d_parameters)[2])'
    )
    lines.append("    source_col <- names(d_parameters)[2]")
    lines.append("  }")
    lines.append("  parameters[[param_map$species[i]]] <- d_parameters[[source_col]]")
    lines.append("}")
    lines.append("")

    # Model call (no thinning, no size distribution)
    lines.append("out <- run_3PG(")
    lines.append("  site = site,")
    lines.append("  climate = climate,")
    lines.append("  species = species,")
    lines.append("  thinning = NULL,")
    lines.append("  parameters = parameters,")
    lines.append("  size_dist = NULL,")
    lines.append(f"  settings = {_r_settings(settings)},")
    lines.append(f"  check_input = {'TRUE' if check_input else 'FALSE'},")
    lines.append("  df_out = TRUE")
    lines.append(")")
    lines.append("")
    lines.append("out$date <- format(as.Date(out$date), \"%Y-%m-%d\")")
    lines.append(f'write.csv(out, "{output_filename}", row.names = FALSE)')
    lines.append("")

    script = "\n".join(lines)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(script)

    return script
