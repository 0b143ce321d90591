"""Party color palette for the choropleth, tooltips and legend."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

NO_DATA_COLOR = "#e0e0e0"
NO_DATA_LABEL = "No Data"

# Insertion order is the legend order
PARTY_COLORS: Dict[str, str] = {
    "UPND": "#e74c3c",  # Red
    "PF": "#27ae60",  # Green
    "MMD": "#f39c12",  # Orange
    "UNIP": "#9b59b6",  # Purple
    "DP": "#3498db",  # Blue
    "SP": "#e67e22",  # Carrot Orange
    "PNUP": "#1abc9c",  # Turquoise
    "PAC": "#34495e",  # Dark Gray
    "NHP": "#16a085",  # Green Sea
    "NAREP": "#8e44ad",  # Wisteria
    "UPPZ": "#c0392b",  # Pomegranate
    "ZUSD": "#2c3e50",  # Midnight Blue
    "PEP": "#d35400",  # Pumpkin
    "EFF": "#7f8c8d",  # Asbestos
    "LM": "#2980b9",  # Belize Hole
    "3RD LM": "#95a5a6",  # Concrete
    "INDEPENDENT": "#bdc3c7",  # Silver
    "OTHER": "#ecf0f1",  # Clouds
}

# Palette entries shown in the legend under a friendlier label
_LEGEND_LABELS = {"INDEPENDENT": "Independent"}
_LEGEND_HIDDEN = {"OTHER"}


class ColorResolver:
    """
    Total mapping from a winning-party label to a display color.

    Unknown, empty or missing labels resolve to the no-data color, so
    ``resolve`` never fails.

    Example:
        resolver = ColorResolver()
        resolver.resolve("UPND")   # "#e74c3c"
        resolver.resolve(None)     # "#e0e0e0"
    """

    def __init__(
        self,
        palette: Optional[Mapping[str, str]] = None,
        no_data_color: str = NO_DATA_COLOR,
    ):
        self.palette: Dict[str, str] = dict(PARTY_COLORS if palette is None else palette)
        self.no_data_color = no_data_color

    def resolve(self, winner: Any) -> str:
        if not isinstance(winner, str) or not winner:
            return self.no_data_color
        color = self.palette.get(winner)
        if color is None:
            color = self.palette.get(winner.strip().upper())
        return color or self.no_data_color

    __call__ = resolve

    def legend(self) -> List[Tuple[str, str]]:
        """Ordered (label, color) legend entries, ending with the no-data swatch."""
        entries = [
            (_LEGEND_LABELS.get(party, party), color)
            for party, color in self.palette.items()
            if party not in _LEGEND_HIDDEN
        ]
        entries.append((NO_DATA_LABEL, self.no_data_color))
        return entries


DEFAULT_RESOLVER = ColorResolver()


def resolve_color(winner: Any) -> str:
    """Resolve with the default palette."""
    return DEFAULT_RESOLVER.resolve(winner)
