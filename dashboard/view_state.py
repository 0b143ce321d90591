"""
Map view state and its transitions.

ViewState is an immutable snapshot. Every user interaction or load
completion is an event, and ``reduce(state, event)`` returns the next
snapshot without touching the previous one. The reducer dispatches on the
event's type.

Modes:
    Overview  - all constituencies, colored by result
    DrillDown - the wards of one selected constituency

Overlapping ward loads follow a last-request-wins policy: each selection
gets a new request id and only the completion or failure carrying the
current id is applied.
"""

from dataclasses import dataclass, replace
from functools import singledispatch
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from .bounds import Bounds, bounds_of_features

MAP_VIEW = "map"
SUMMARY_VIEW = "summary"


@dataclass(frozen=True)
class Viewport:
    longitude: float = 28.3
    latitude: float = -13.5
    zoom: float = 5.5


DEFAULT_VIEWPORT = Viewport()


@dataclass(frozen=True)
class FitBoundsRequest:
    """Smooth viewport transition the renderer should perform."""

    bounds: Bounds
    padding: int = 50
    duration_ms: int = 1000


@dataclass(frozen=True)
class WardRequest:
    request_id: int
    constituency_name: str


@dataclass(frozen=True)
class ViewState:
    viewport: Viewport = DEFAULT_VIEWPORT
    default_viewport: Viewport = DEFAULT_VIEWPORT
    hovered: Optional[Mapping[str, Any]] = None
    selected: Optional[Mapping[str, Any]] = None
    drill_down_active: bool = False
    active_wards: Optional[Mapping[str, Any]] = None
    pending_request: Optional[WardRequest] = None
    request_seq: int = 0
    fit_request: Optional[FitBoundsRequest] = None
    last_error: Optional[str] = None
    active_view: str = MAP_VIEW
    name_property: str = "ConstName"
    bounds_property: str = "bounds"
    fit_padding: int = 50
    fit_duration_ms: int = 1000

    @property
    def mode(self) -> str:
        return "drilldown" if self.drill_down_active else "overview"

    @property
    def ward_count(self) -> int:
        if not self.active_wards:
            return 0
        return len(self.active_wards.get("features") or [])

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the state for the rendering layer."""
        return {
            "viewport": {
                "longitude": self.viewport.longitude,
                "latitude": self.viewport.latitude,
                "zoom": self.viewport.zoom,
            },
            "mode": self.mode,
            "hovered": dict(self.hovered) if self.hovered else None,
            "selected": dict(self.selected) if self.selected else None,
            "drillDownActive": self.drill_down_active,
            "wardCount": self.ward_count,
            "fitBounds": self.fit_request.bounds.to_fit_bounds() if self.fit_request else None,
            "error": self.last_error,
            "view": self.active_view,
        }


# Events


@dataclass(frozen=True)
class PointerMoved:
    """Pointer over a constituency (its properties) or over nothing (None)."""

    properties: Optional[Mapping[str, Any]]


@dataclass(frozen=True)
class ConstituencySelected:
    properties: Mapping[str, Any]


@dataclass(frozen=True)
class SelectionCleared:
    pass


@dataclass(frozen=True)
class WardsLoaded:
    request_id: int
    wards: Mapping[str, Any]


@dataclass(frozen=True)
class WardsLoadFailed:
    request_id: int
    reason: str


@dataclass(frozen=True)
class BackToOverview:
    pass


@dataclass(frozen=True)
class ViewportChanged:
    viewport: Viewport


@dataclass(frozen=True)
class ViewToggled:
    view: str


@singledispatch
def reduce(event: Any, state: ViewState) -> ViewState:
    raise TypeError(f"Unhandled view event: {type(event).__name__}")


def apply(state: ViewState, event: Any) -> ViewState:
    """Next state after ``event``."""
    return reduce(event, state)


@reduce.register
def _pointer_moved(event: PointerMoved, state: ViewState) -> ViewState:
    if state.drill_down_active:
        return state
    return replace(state, hovered=event.properties)


@reduce.register
def _constituency_selected(event: ConstituencySelected, state: ViewState) -> ViewState:
    if state.drill_down_active:
        return state
    request_id = state.request_seq + 1
    name = str(event.properties.get(state.name_property) or "")
    return replace(
        state,
        selected=event.properties,
        request_seq=request_id,
        pending_request=WardRequest(request_id=request_id, constituency_name=name),
        last_error=None,
    )


@reduce.register
def _selection_cleared(event: SelectionCleared, state: ViewState) -> ViewState:
    return replace(state, selected=None)


def _target_bounds(state: ViewState, wards: Mapping[str, Any]) -> Optional[Bounds]:
    precomputed = None
    if state.selected:
        precomputed = Bounds.from_value(state.selected.get(state.bounds_property))
    return precomputed or bounds_of_features(wards)


@reduce.register
def _wards_loaded(event: WardsLoaded, state: ViewState) -> ViewState:
    pending = state.pending_request
    if pending is None or pending.request_id != event.request_id:
        logger.debug(f"Ignoring superseded ward load #{event.request_id}")
        return state

    bounds = _target_bounds(state, event.wards)
    fit_request = None
    if bounds is not None:
        fit_request = FitBoundsRequest(
            bounds=bounds, padding=state.fit_padding, duration_ms=state.fit_duration_ms
        )
    else:
        logger.debug(f"No bounds for {pending.constituency_name}, keeping viewport")

    return replace(
        state,
        drill_down_active=True,
        active_wards=event.wards,
        pending_request=None,
        fit_request=fit_request,
        last_error=None,
    )


@reduce.register
def _wards_load_failed(event: WardsLoadFailed, state: ViewState) -> ViewState:
    pending = state.pending_request
    if pending is None or pending.request_id != event.request_id:
        logger.debug(f"Ignoring failure of superseded ward load #{event.request_id}")
        return state
    return replace(
        state,
        drill_down_active=False,
        active_wards=None,
        pending_request=None,
        last_error=event.reason,
    )


@reduce.register
def _back_to_overview(event: BackToOverview, state: ViewState) -> ViewState:
    return replace(
        state,
        viewport=state.default_viewport,
        hovered=None,
        selected=None,
        drill_down_active=False,
        active_wards=None,
        pending_request=None,
        fit_request=None,
    )


@reduce.register
def _viewport_changed(event: ViewportChanged, state: ViewState) -> ViewState:
    return replace(state, viewport=event.viewport, fit_request=None)


@reduce.register
def _view_toggled(event: ViewToggled, state: ViewState) -> ViewState:
    if event.view not in (MAP_VIEW, SUMMARY_VIEW):
        raise ValueError(f"Unknown view: {event.view!r}")
    return replace(state, active_view=event.view)
