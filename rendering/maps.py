"""
Interactive Leaflet maps for the overview and drill-down layers.

The dashboard core decides what to draw; this module only hands the active
layer and view state to folium.
"""

import copy
import html
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import folium
from loguru import logger

from dashboard.colors import DEFAULT_RESOLVER, ColorResolver
from dashboard.geo_join import FILL_COLOR_PROPERTY
from dashboard.view_state import ViewState

TOOLTIP_STYLE = """
    background-color: rgba(255, 255, 255, 0.95);
    border: none;
    border-radius: 8px;
    box-shadow: 0 2px 10px rgba(0,0,0,0.2);
    padding: 15px;
    font-family: Arial, sans-serif;
    font-size: 12px;
"""

# Fields added to every display feature so tooltips never miss a key
DISPLAY_FIELDS = [
    "label_name",
    "label_district",
    "label_province",
    "label_winner",
    "label_votes",
    "label_margin",
]
DISPLAY_ALIASES = ["Constituency:", "District:", "Province:", "Winner:", "Votes:", "Margin:"]


def _format_int(value: Any) -> str:
    if isinstance(value, (int, float)):
        return f"{int(value):,}"
    return "-"


def display_collection(
    layer: Mapping[str, Any],
    columns: Mapping[str, str],
) -> Dict[str, Any]:
    """
    Copy of a joined layer with pre-formatted tooltip labels.

    Args:
        layer: Joined constituency FeatureCollection
        columns: Property names for name/district/province

    Returns:
        New FeatureCollection safe to hand to folium
    """
    features = []
    for feature in layer.get("features") or []:
        properties = dict(feature.get("properties") or {})
        winner = properties.get("winner")
        properties.update(
            {
                "label_name": str(properties.get(columns["constituency_name"], "")),
                "label_district": str(properties.get(columns["district_name"], "")),
                "label_province": str(properties.get(columns["province_name"], "")),
                "label_winner": winner or "No data",
                "label_votes": _format_int(properties.get("votes")) if winner else "-",
                "label_margin": f"{properties['margin']}%"
                if winner and properties.get("margin") is not None
                else "-",
            }
        )
        display = {**copy.deepcopy(feature), "properties": properties}
        display["id"] = str(len(features))
        features.append(display)
    return {"type": "FeatureCollection", "features": features}


def legend_html(entries: Sequence[Tuple[str, str]]) -> str:
    """Floating legend box listing party swatches."""
    rows = "".join(
        f'<div style="display:flex;align-items:center;gap:8px;">'
        f'<div style="width:16px;height:16px;background:{color};border-radius:3px;"></div>'
        f'<span style="font-size:11px;">{html.escape(label)}</span></div>'
        for label, color in entries
    )
    return (
        '<div style="position:fixed;bottom:30px;right:10px;z-index:1000;'
        "background:rgba(255,255,255,0.95);padding:15px;border-radius:8px;"
        'box-shadow:0 2px 10px rgba(0,0,0,0.2);max-height:80vh;overflow-y:auto;">'
        '<h4 style="margin:0 0 10px 0;font-size:14px;">Parties</h4>'
        f'<div style="display:flex;flex-direction:column;gap:6px;">{rows}</div></div>'
    )


def detail_html(
    properties: Mapping[str, Any],
    columns: Mapping[str, str],
    resolver: ColorResolver = DEFAULT_RESOLVER,
) -> str:
    """Detail panel for a selected constituency, including the party breakdown."""
    name = html.escape(str(properties.get(columns["constituency_name"], "")))
    parts: List[str] = [
        f"<h2>{name}</h2>",
        f"<p><strong>District:</strong> {html.escape(str(properties.get(columns['district_name'], '')))}</p>",
        f"<p><strong>Province:</strong> {html.escape(str(properties.get(columns['province_name'], '')))}</p>",
    ]
    winner = properties.get("winner")
    if winner:
        parts.append(
            f'<p><strong>Winner:</strong> <span style="color:{resolver.resolve(winner)}">'
            f"{html.escape(str(winner))}</span></p>"
        )
        if properties.get("votes") is not None:
            parts.append(f"<p><strong>Votes:</strong> {_format_int(properties['votes'])}</p>")
        if properties.get("margin") is not None:
            parts.append(f"<p><strong>Margin:</strong> {properties['margin']}%</p>")
        if properties.get("totalVotes") is not None:
            parts.append(
                f"<p><strong>Total Votes:</strong> {_format_int(properties['totalVotes'])}</p>"
            )

    rows = properties.get("results")
    if isinstance(rows, list) and rows:
        parts.append("<h3>Results</h3>")
        for row in rows:
            party = html.escape(str(row.get("party", "")))
            percentage = row.get("percentage", 0)
            parts.append(
                '<div style="padding:10px;margin:5px 0;background:#f5f5f5;border-radius:5px;">'
                f"<strong>{party}</strong> {_format_int(row.get('votes'))} ({percentage}%)"
                '<div style="margin-top:5px;height:5px;background:#ddd;border-radius:3px;">'
                f'<div style="height:100%;width:{percentage}%;'
                f'background:{resolver.resolve(row.get("party"))};"></div></div></div>'
            )
    return "".join(parts)


def _base_map(state: ViewState, tiles: str) -> folium.Map:
    return folium.Map(
        location=[state.viewport.latitude, state.viewport.longitude],
        zoom_start=state.viewport.zoom,
        tiles=tiles,
        prefer_canvas=True,
    )


def build_overview_map(
    layer: Mapping[str, Any],
    state: ViewState,
    columns: Mapping[str, str],
    resolver: ColorResolver = DEFAULT_RESOLVER,
    tiles: str = "CartoDB Positron",
    fill_opacity: float = 0.6,
    hover_opacity: float = 0.8,
    title: str = "Election Results",
) -> folium.Map:
    """
    Choropleth of constituencies colored by winning party.

    Args:
        layer: Joined constituency FeatureCollection
        state: Current view state (viewport and selection)
        columns: Property names for name/district/province
        resolver: Color resolver used for the legend and detail panel
        tiles: Folium tile set
        fill_opacity: Resting fill opacity
        hover_opacity: Fill opacity under the pointer
        title: Heading rendered above the map

    Returns:
        folium.Map
    """
    m = _base_map(state, tiles)
    display = display_collection(layer, columns)
    no_data = resolver.no_data_color

    if display["features"]:
        folium.GeoJson(
            data=display,
            name="Constituencies",
            style_function=lambda feature: {
                "fillColor": feature.get("properties", {}).get(FILL_COLOR_PROPERTY, no_data),
                "color": "#ffffff",
                "weight": 1,
                "fillOpacity": fill_opacity,
            },
            highlight_function=lambda feature: {"weight": 3, "fillOpacity": hover_opacity},
            tooltip=folium.GeoJsonTooltip(
                fields=DISPLAY_FIELDS, aliases=DISPLAY_ALIASES, sticky=False, style=TOOLTIP_STYLE
            ),
        ).add_to(m)
    else:
        logger.warning("⚠️ Overview layer has no features to draw")

    if state.selected:
        panel = detail_html(state.selected, columns, resolver)
        m.get_root().html.add_child(
            folium.Element(
                '<div style="position:fixed;top:70px;left:10px;z-index:1000;background:white;'
                "padding:20px;border-radius:8px;box-shadow:0 2px 10px rgba(0,0,0,0.2);"
                f'max-width:400px;max-height:80vh;overflow-y:auto;">{panel}</div>'
            )
        )

    m.get_root().html.add_child(folium.Element(legend_html(resolver.legend())))
    m.get_root().html.add_child(
        folium.Element(
            f'<h3 align="center" style="font-size:20px;color:#2c3e50;margin-top:10px;">'
            f"<b>{html.escape(title)}</b></h3>"
        )
    )
    return m


def build_ward_map(
    state: ViewState,
    columns: Mapping[str, str],
    tiles: str = "CartoDB Positron",
    fill_color: str = "#3498db",
    fill_opacity: float = 0.3,
    line_color: str = "#2c3e50",
) -> folium.Map:
    """
    Ward layer of the drilled-down constituency.

    The map is fitted to the state's pending fit request when there is one.

    Raises:
        ValueError: The state is not in drill-down mode
    """
    if not state.drill_down_active or state.active_wards is None:
        raise ValueError("Ward map requires an active drill-down")

    m = _base_map(state, tiles)
    ward_name = columns["ward_name"]
    wards = copy.deepcopy(dict(state.active_wards))
    features = wards.get("features") or []
    for index, feature in enumerate(features):
        properties = dict(feature.get("properties") or {})
        properties["label_ward"] = str(properties.get(ward_name, ""))
        feature["properties"] = properties
        feature["id"] = str(index)

    if features:
        folium.GeoJson(
            data=wards,
            name="Wards",
            style_function=lambda feature: {
                "fillColor": fill_color,
                "fillOpacity": fill_opacity,
                "color": line_color,
                "weight": 2,
            },
            tooltip=folium.GeoJsonTooltip(
                fields=["label_ward"], aliases=["Ward:"], style=TOOLTIP_STYLE
            ),
        ).add_to(m)

    if state.fit_request is not None:
        bounds = state.fit_request.bounds
        padding = state.fit_request.padding
        # Leaflet takes [lat, lng] corners
        m.fit_bounds(
            [[bounds.min_latitude, bounds.min_longitude], [bounds.max_latitude, bounds.max_longitude]],
            padding=(padding, padding),
        )

    name = ""
    if state.selected:
        name = str(state.selected.get(columns["constituency_name"], ""))
    m.get_root().html.add_child(
        folium.Element(
            '<div style="position:fixed;top:20px;left:60px;z-index:1000;'
            "background:rgba(255,255,255,0.95);padding:12px 16px;border-radius:5px;"
            'box-shadow:0 2px 5px rgba(0,0,0,0.2);">'
            f'<p style="margin:0;font-size:14px;color:#2c3e50;"><strong>{html.escape(name)}</strong></p>'
            f'<p style="margin:5px 0 0 0;font-size:12px;color:#666;">{state.ward_count} Wards</p>'
            "</div>"
        )
    )
    return m


def save_map(m: folium.Map, output_path: Path) -> Path:
    """Write a folium map to HTML, creating the parent directory."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    m.save(str(output_path))
    logger.success(f"  ✅ Interactive map saved: {output_path}")
    return output_path
