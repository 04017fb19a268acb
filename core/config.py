"""Static configuration for the Delaware tax change map."""

# Counties with published data, in display order
COUNTIES = ["new_castle", "kent", "sussex"]

COUNTY_LABELS = {
    "new_castle": "New Castle County",
    "kent": "Kent County",
    "sussex": "Sussex County",
}

# Scope value meaning "union of all counties"
ALL_COUNTIES = "all"

# Key used for fixed bucket schemes that apply to the statewide view
STATEWIDE = "statewide"

# Tax years compared by every layer
PRIOR_YEAR = 2024
CURRENT_YEAR = 2025

# Number of outliers surfaced by the ranker
TOP_K_OUTLIERS = 10

# Half-width of the near-median band, as a fraction of (max - min)
NEAR_MEDIAN_FRACTION = 0.05

# Default data file layout (relative to the configured base path)
DEFAULT_DATA_BASE_PATH = "data"
DEFAULT_FILE_PATTERN = "{county}_all_layers.json"

# Marker shown wherever a number is missing
NA_MARKER = "N/A"

# Diverging palette: larger decreases in blue, larger increases in red
DIVERGING_PALETTE = [
    "#08306b",  # dark blue
    "#2171b5",  # medium blue
    "#c6dbef",  # light blue
    "#f7f7f7",  # near median
    "#fcbba1",  # light red
    "#fb6a4a",  # medium red
    "#a50f15",  # dark red
]

NEUTRAL_COLOR = DIVERGING_PALETTE[3]

# Reserved for regions without data; never used by a real bucket
UNKNOWN_COLOR = "#bdbdbd"

# Property class colors (categorical)
PROPERTY_CLASS_COLORS = {
    "Residential": "#fdb462",
    "Commercial": "#80b1d3",
    "Industrial": "#bebada",
    "Agricultural": "#b3de69",
    "Exempt": "#d9d9d9",
}

# Map display
MAP_CENTER = [39.0, -75.5]  # Delaware [lat, lon]
MAP_ZOOM = 8
COUNTY_MAP_ZOOM = {
    "new_castle": ([39.58, -75.64], 10),
    "kent": ([39.10, -75.52], 10),
    "sussex": ([38.68, -75.38], 9),
}

DEFAULT_STROKE = {"strokeColor": "#333333", "weight": 1, "opacity": 0.6}
HOVER_STROKE = {"strokeColor": "#000000", "weight": 3, "opacity": 0.9}


def county_label(scope: str) -> str:
    """Human-readable name for a scope."""
    if scope == ALL_COUNTIES:
        return "Delaware"
    return COUNTY_LABELS.get(scope, scope.replace("_", " ").title())
