"""
Configuration dataclasses and constants for 3-PG simulations.

All fixed estimation assumptions (carbon fraction, unit conversions,
atmospheric CO2 and delta 13C) live here as named constants so they can be
audited and overridden explicitly instead of being buried in the pipeline.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


# Default R interpreter used to run the r3PG package
DEFAULT_RSCRIPT = Path(os.environ.get("R3PG_RSCRIPT", "Rscript"))
DEFAULT_TIMEOUT = 600  # seconds

# Carbon accounting
CARBON_FRACTION = 0.5  # Share of dry biomass that is carbon
ACRE_IN_HECTARES = 0.4046856
SHORT_TONS_PER_TONNE = 1.10231  # 1 Mg = 1.10231 short tons
CO2_PER_CARBON = 44 / 12  # Molecular weight ratio CO2:C

# Atmosphere (used when no measurements are available)
DEFAULT_CO2_PPM = 410.0
DEFAULT_D13C_ATM = -8.0

# r3PG rejects non-positive radiation
SOLAR_RADIATION_FLOOR = 5.0

# r3PG soil class codes
SOIL_CLASSES = {
    "sand": 1,
    "sandy_loam": 2,
    "clay_loam": 3,
    "clay": 4,
}

# Columns r3PG expects in the climate table, in order
CLIMATE_COLUMNS = [
    "year",
    "month",
    "tmp_min",
    "tmp_max",
    "tmp_ave",
    "prcp",
    "srad",
    "frost_days",
    "co2",
    "d13catm",
]


def parse_month(value: str) -> tuple[int, int]:
    """
    Parse a "YYYY-MM" string into (year, month).

    Raises:
        ValueError: If the string is not a valid year-month
    """
    try:
        year_str, month_str = str(value).split("-")
        year, month = int(year_str), int(month_str)
    except ValueError:
        raise ValueError(f"Expected 'YYYY-MM', got {value!r}") from None

    if not 1 <= month <= 12:
        raise ValueError(f"Month must be in 1-12, got {value!r}")

    return year, month


def format_month(year: int, month: int) -> str:
    """Format a year and month as "YYYY-MM"."""
    return f"{int(year):04d}-{int(month):02d}"


@dataclass(frozen=True)
class SiteConfig:
    """
    Site description shared by every species in a run.

    Attributes:
        latitude: Site latitude in decimal degrees
        altitude: Site altitude in metres
        soil_class: One of "sand", "sandy_loam", "clay_loam", "clay"
        asw_i: Initial available soil water (mm)
        asw_min: Minimum available soil water (mm)
        asw_max: Maximum available soil water (mm)
        start: First simulated month ("YYYY-MM")
        end: Last simulated month ("YYYY-MM")
    """

    latitude: float
    altitude: float
    start: str
    end: str
    soil_class: str = "sandy_loam"
    asw_i: float = 120.0
    asw_min: float = 50.0
    asw_max: float = 200.0

    def __post_init__(self):
        """Validate site configuration."""
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude must be in [-90, 90], got {self.latitude}")
        if self.soil_class not in SOIL_CLASSES:
            raise ValueError(
                f"Invalid soil_class '{self.soil_class}'. "
                f"Valid classes: {sorted(SOIL_CLASSES)}"
            )
        if self.asw_min < 0:
            raise ValueError(f"asw_min must be >= 0, got {self.asw_min}")
        if self.asw_min > self.asw_max:
            raise ValueError(
                f"asw_min ({self.asw_min}) must be <= asw_max ({self.asw_max})"
            )
        if parse_month(self.start) > parse_month(self.end):
            raise ValueError(f"start ({self.start}) must not be after end ({self.end})")

    @property
    def soil_class_code(self) -> int:
        """Numeric soil class understood by r3PG."""
        return SOIL_CLASSES[self.soil_class]

    @property
    def num_months(self) -> int:
        """Number of simulated months, both ends included."""
        start_year, start_month = parse_month(self.start)
        end_year, end_month = parse_month(self.end)
        return (end_year - start_year) * 12 + (end_month - start_month) + 1

    @property
    def num_years(self) -> float:
        """Simulation length in years."""
        return self.num_months / 12


@dataclass(frozen=True)
class SpeciesState:
    """
    Initial state of one species in the stand.

    Attributes:
        name: Species label used in model output
        planted: Planting month ("YYYY-MM")
        fertility: Site fertility rating (0-1)
        stems_n: Stems per hectare
        biom_stem: Initial stem biomass (Mg/ha)
        biom_root: Initial root biomass (Mg/ha)
        biom_foliage: Initial foliage biomass (Mg/ha)
        parameter_species: Column of the r3PG parameter table to borrow
            physiology from (defaults to name)
    """

    name: str
    planted: str
    fertility: float
    stems_n: float
    biom_stem: float
    biom_root: float
    biom_foliage: float
    parameter_species: str | None = None

    def __post_init__(self):
        """Validate species state."""
        if not self.name:
            raise ValueError("name cannot be empty")
        parse_month(self.planted)
        if not 0.0 <= self.fertility <= 1.0:
            raise ValueError(f"fertility must be in [0, 1], got {self.fertility}")
        if self.stems_n <= 0:
            raise ValueError(f"stems_n must be > 0, got {self.stems_n}")
        for attr in ("biom_stem", "biom_root", "biom_foliage"):
            if getattr(self, attr) < 0:
                raise ValueError(f"{attr} must be >= 0, got {getattr(self, attr)}")

    @property
    def total_biomass(self) -> float:
        """Initial stem + root + foliage biomass (Mg/ha)."""
        return self.biom_stem + self.biom_root + self.biom_foliage

    @property
    def parameters_from(self) -> str:
        """Name of the parameter-table column used for this species."""
        return self.parameter_species or self.name


@dataclass(frozen=True)
class CarbonConstants:
    """
    Conversion factors applied to model biomass.

    Attributes:
        carbon_fraction: Share of dry biomass that is carbon
        plot_area_acres: Plot size used for absolute carbon mass
        short_tons_per_tonne: Metric tonne to short ton factor
        co2_per_carbon: Carbon to CO2-equivalent factor
    """

    carbon_fraction: float = CARBON_FRACTION
    plot_area_acres: float = 0.1
    short_tons_per_tonne: float = SHORT_TONS_PER_TONNE
    co2_per_carbon: float = CO2_PER_CARBON

    def __post_init__(self):
        """Validate constants."""
        if not 0.0 < self.carbon_fraction <= 1.0:
            raise ValueError(
                f"carbon_fraction must be in (0, 1], got {self.carbon_fraction}"
            )
        if self.plot_area_acres <= 0:
            raise ValueError(
                f"plot_area_acres must be > 0, got {self.plot_area_acres}"
            )

    @property
    def plot_area_ha(self) -> float:
        """Plot area in hectares."""
        return self.plot_area_acres * ACRE_IN_HECTARES


@dataclass(frozen=True)
class ClimateConstants:
    """Atmospheric values assumed when no measurements exist."""

    co2: float = DEFAULT_CO2_PPM
    d13catm: float = DEFAULT_D13C_ATM


@dataclass
class ModelRunOptions:
    """
    Options for running r3PG through Rscript.

    Attributes:
        rscript: Path or name of the Rscript executable
        timeout: Maximum execution time per attempt in seconds
        check_input: Let r3PG validate its inputs
    """

    rscript: Path = field(default_factory=lambda: DEFAULT_RSCRIPT)
    timeout: int = DEFAULT_TIMEOUT
    check_input: bool = True

    def __post_init__(self):
        """Validate options."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


# r3PG setting codes
MODEL_CODES = (1, 2)
FLAG_CODES = (0, 1)


@dataclass(frozen=True)
class ModelSettings:
    """
    Numerical-method configuration passed to run_3PG().

    Attributes:
        light_model: 1 = 3-PGpjs (single layer), 2 = 3-PGmix (layered)
        transp_model: 1 = 3-PGpjs, 2 = 3-PGmix transpiration
        phys_model: 1 = 3-PGpjs, 2 = 3-PGmix physiology
        correct_bias: 0/1 bias correction of size distributions (None = r3PG default)
        calculate_d13c: 0/1 isotope discrimination output (None = r3PG default)
    """

    light_model: int = 2
    transp_model: int = 1
    phys_model: int = 1
    correct_bias: int | None = None
    calculate_d13c: int | None = None

    def __post_init__(self):
        """Validate setting codes."""
        for attr in ("light_model", "transp_model", "phys_model"):
            value = getattr(self, attr)
            if value not in MODEL_CODES:
                raise ValueError(f"{attr} must be one of {MODEL_CODES}, got {value}")
        for attr in ("correct_bias", "calculate_d13c"):
            value = getattr(self, attr)
            if value is not None and value not in FLAG_CODES:
                raise ValueError(f"{attr} must be one of {FLAG_CODES}, got {value}")

    def as_dict(self) -> dict[str, int]:
        """Settings that are set, in r3PG argument order."""
        names = [
            "light_model",
            "transp_model",
            "phys_model",
            "correct_bias",
            "calculate_d13c",
        ]
        return {
            name: getattr(self, name)
            for name in names
            if getattr(self, name) is not None
        }

    def label(self) -> str:
        """Human-readable description, e.g. 'light_model=2, transp_model=1, phys_model=1'."""
        return ", ".join(f"{name}={value}" for name, value in self.as_dict().items())


# Multi-species default, then the 3-PGmix fallback with bias correction and
# d13C output switched off
PRIMARY_SETTINGS = ModelSettings(light_model=2, transp_model=1, phys_model=1)
SINGLE_SPECIES_SETTINGS = ModelSettings(light_model=1, transp_model=1, phys_model=1)
ALTERNATE_SETTINGS = ModelSettings(
    light_model=2,
    transp_model=2,
    phys_model=2,
    correct_bias=0,
    calculate_d13c=0,
)

DEFAULT_CANDIDATES = (PRIMARY_SETTINGS, ALTERNATE_SETTINGS)
