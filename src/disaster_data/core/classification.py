"""
Disaster type classification.

Maps free-text EMDAT type/subtype strings onto the closed DisasterType
taxonomy. The keyword table is scanned top to bottom and the first row
with a keyword contained in either string wins, so row order decides
overlaps ("storm surge" is a flood, not a storm).
"""

from disaster_data.config import DisasterType


# =============================================================================
# KEYWORD TABLES
# =============================================================================

# Order matters: first match wins.
TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], DisasterType], ...] = (
    (("earthquake", "seismic", "quake"), DisasterType.EARTHQUAKE),
    (("flood", "storm surge", "inundation"), DisasterType.FLOOD),
    (("hurricane", "typhoon", "cyclone", "tornado", "storm"), DisasterType.HURRICANE),
    (("tsunami", "tidal wave"), DisasterType.TSUNAMI),
    (("volcan", "eruption", "lava"), DisasterType.VOLCANO),
    (("drought", "dry spell"), DisasterType.DROUGHT),
    (("fire",), DisasterType.WILDFIRE),
)

# Natural hazard vocabulary used by the optional inclusion filter. Broader
# than TYPE_KEYWORDS: anything geophysical, meteorological, hydrological or
# climatological passes, even if it classifies as "other".
NATURAL_HAZARD_KEYWORDS: tuple[str, ...] = (
    # Geophysical
    "earthquake",
    "seismic",
    "quake",
    "tsunami",
    "volcan",
    "eruption",
    "lava",
    "ash fall",
    "mass movement",
    "landslide",
    "rockfall",
    "subsidence",
    # Meteorological
    "storm",
    "cyclone",
    "hurricane",
    "typhoon",
    "tornado",
    "blizzard",
    "hail",
    "lightning",
    "extreme temperature",
    "heat wave",
    "cold wave",
    "severe winter",
    "fog",
    # Hydrological
    "flood",
    "inundation",
    "avalanche",
    "mudslide",
    "wave action",
    "rogue wave",
    "glacial lake",
    # Climatological
    "drought",
    "dry spell",
    "wildfire",
    "forest fire",
    "bush fire",
    "land fire",
    "glacial",
)


def _clean(value: str | None) -> str:
    return (value or "").strip().lower()


def classify(disaster_type: str | None, sub_type: str | None = None) -> DisasterType:
    """
    Classify a disaster from its type and subtype strings.

    Never fails: anything unrecognised is DisasterType.OTHER.

    Examples:
        >>> classify("Earthquake", "")
        <DisasterType.EARTHQUAKE: 'earthquake'>
        >>> classify("", "Flash Flood")
        <DisasterType.FLOOD: 'flood'>
    """
    type_text = _clean(disaster_type)
    sub_text = _clean(sub_type)

    for keywords, category in TYPE_KEYWORDS:
        for keyword in keywords:
            if keyword in type_text or keyword in sub_text:
                return category

    return DisasterType.OTHER


def is_natural_disaster(disaster_type: str | None, sub_type: str | None = None) -> bool:
    """True if either string mentions a recognised natural hazard."""
    type_text = _clean(disaster_type)
    sub_text = _clean(sub_type)
    return any(kw in type_text or kw in sub_text for kw in NATURAL_HAZARD_KEYWORDS)
