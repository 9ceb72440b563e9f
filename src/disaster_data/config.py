"""
Configuration settings and constants for Disaster Data Platform.
"""

from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# PATHS
# =============================================================================

PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent
DATA_DIR = PACKAGE_ROOT / "data"
DEFAULT_GAZETTEER_PATH = DATA_DIR / "gazetteer.json"
EXPORTS_DIR = PROJECT_ROOT / "exports"


# =============================================================================
# ENUMS
# =============================================================================


class DisasterType(str, Enum):
    """Closed taxonomy of disaster categories."""

    EARTHQUAKE = "earthquake"
    FLOOD = "flood"
    HURRICANE = "hurricane"
    WILDFIRE = "wildfire"
    TSUNAMI = "tsunami"
    DROUGHT = "drought"
    VOLCANO = "volcano"
    OTHER = "other"


class FallbackLevel(str, Enum):
    """Granularity of the location data that produced a coordinate."""

    EXACT = "exact"
    CITY = "city"
    REGION = "region"
    COUNTRY = "country"
    FAILED = "failed"


class EventSource(str, Enum):
    """Provenance of a disaster event."""

    EMDAT = "EMDAT"
    OTHER = "OTHER"


class SeverityModel(str, Enum):
    """Available severity scoring models."""

    COMPOSITE = "composite"
    THRESHOLD = "threshold"


# =============================================================================
# SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DISASTER_DATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    database_url: str = Field(default=f"sqlite:///{PROJECT_ROOT / 'disaster_data.db'}")

    # Geocoding
    gazetteer_path: Path | None = Field(default=None)

    # Normalization
    natural_disasters_only: bool = Field(default=False)
    severity_model: SeverityModel = Field(default=SeverityModel.COMPOSITE)
    quote_aware_csv: bool = Field(default=False)
    source_url: str = Field(default="https://www.emdat.be")

    # Logging
    log_level: str = Field(default="WARNING")

    @property
    def resolved_gazetteer_path(self) -> Path:
        """Gazetteer file to load, falling back to the packaged default."""
        return self.gazetteer_path or DEFAULT_GAZETTEER_PATH


settings = Settings()


# =============================================================================
# EMDAT COLUMNS
# =============================================================================

COL_DISASTER_NO = "Disaster No"
COL_EVENT_NAME = "Event Name"
COL_DISASTER_TYPE = "Disaster Type"
COL_DISASTER_SUBTYPE = "Disaster Subtype"
COL_COUNTRY = "Country"
COL_REGION = "Region"
COL_LOCATION = "Location"
COL_LATITUDE = "Latitude"
COL_LONGITUDE = "Longitude"
COL_START_DATE = "Start Date"
COL_END_DATE = "End Date"
COL_YEAR = "Year"
COL_START_YEAR = "Start Year"
COL_START_MONTH = "Start Month"
COL_START_DAY = "Start Day"
COL_END_YEAR = "End Year"
COL_END_MONTH = "End Month"
COL_END_DAY = "End Day"
COL_TOTAL_DEATHS = "Total Deaths"
COL_NO_INJURED = "No Injured"
COL_NO_MISSING = "No Missing"
COL_TOTAL_AFFECTED = "Total Affected"
COL_NO_HOMELESS = "No Homeless"
COL_TOTAL_DAMAGES = "Total Damages ('000 US$)"
COL_TOTAL_DAMAGES_ADJUSTED = "Total Damages, Adjusted ('000 US$)"
COL_INSURED_DAMAGES = "Insured Damages ('000 US$)"
COL_RECONSTRUCTION_COSTS = "Reconstruction Costs ('000 US$)"
COL_AID_CONTRIBUTION = "Aid Contribution ('000 US$)"
COL_INFRASTRUCTURE_DAMAGE = "Infrastructure Damage"

# Every column the normalizer reads; absent columns read as "".
EMDAT_COLUMNS: tuple[str, ...] = (
    COL_DISASTER_NO,
    COL_EVENT_NAME,
    COL_DISASTER_TYPE,
    COL_DISASTER_SUBTYPE,
    COL_COUNTRY,
    COL_REGION,
    COL_LOCATION,
    COL_LATITUDE,
    COL_LONGITUDE,
    COL_START_DATE,
    COL_END_DATE,
    COL_YEAR,
    COL_START_YEAR,
    COL_START_MONTH,
    COL_START_DAY,
    COL_END_YEAR,
    COL_END_MONTH,
    COL_END_DAY,
    COL_TOTAL_DEATHS,
    COL_NO_INJURED,
    COL_NO_MISSING,
    COL_TOTAL_AFFECTED,
    COL_NO_HOMELESS,
    COL_TOTAL_DAMAGES,
    COL_TOTAL_DAMAGES_ADJUSTED,
    COL_INSURED_DAMAGES,
    COL_RECONSTRUCTION_COSTS,
    COL_AID_CONTRIBUTION,
    COL_INFRASTRUCTURE_DAMAGE,
)

# Header fragments a spreadsheet export must contain (case-insensitive).
REQUIRED_SPREADSHEET_COLUMNS: tuple[str, ...] = (
    "start year",
    "start month",
    "start day",
    "disaster type",
    "country",
)

# Alternative spellings used by other EMDAT export versions. Matching is
# already case- and punctuation-insensitive, so only real renames go here.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    COL_DISASTER_NO: ("DisNo.", "Disaster Number"),
    COL_COUNTRY: ("Country/Area",),
    COL_TOTAL_DAMAGES: ("Total Damage ('000 US$)",),
    COL_TOTAL_DAMAGES_ADJUSTED: ("Total Damage, Adjusted ('000 US$)",),
    COL_INSURED_DAMAGES: ("Insured Damage ('000 US$)",),
    COL_RECONSTRUCTION_COSTS: ("Reconstruction Cost ('000 US$)",),
}
