"""
Dashboard core for the election results map.

Joins constituency boundaries with result records, resolves party colors,
computes drill-down bounds, aggregates the seat summary and tracks the
map's view state.
"""

__version__ = "0.1.0"

from .bounds import Bounds, bounds_of_coordinates, bounds_of_features, bounds_of_geometry
from .colors import NO_DATA_COLOR, PARTY_COLORS, ColorResolver, resolve_color
from .controller import DashboardSession, ViewStateController
from .errors import ConfigurationError, LoadFailure
from .geo_join import JoinCache, join_results
from .models import PartyResult, ResultRecord
from .summary import Summary, summarize
from .view_state import ViewState, Viewport

__all__ = [
    "Bounds",
    "bounds_of_coordinates",
    "bounds_of_features",
    "bounds_of_geometry",
    "NO_DATA_COLOR",
    "PARTY_COLORS",
    "ColorResolver",
    "resolve_color",
    "DashboardSession",
    "ViewStateController",
    "ConfigurationError",
    "LoadFailure",
    "JoinCache",
    "join_results",
    "PartyResult",
    "ResultRecord",
    "Summary",
    "summarize",
    "ViewState",
    "Viewport",
]
