"""
Rendering adapters for the dashboard.

Maps are drawn with folium, the seat chart with matplotlib and the results
table with pandas.
"""

from .charts import format_summary, plot_seats_by_party, write_summary
from .maps import build_overview_map, build_ward_map, save_map

__all__ = [
    "build_overview_map",
    "build_ward_map",
    "format_summary",
    "plot_seats_by_party",
    "save_map",
    "write_summary",
]
