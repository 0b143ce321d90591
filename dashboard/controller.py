"""
Controllers tying the pure core to data loading.

ViewStateController owns the current ViewState and feeds events through the
reducer. DashboardSession holds the independently loaded results and
boundaries and derives the overview layer and summary from them.
"""

from typing import Any, Callable, Dict, Mapping, Optional

from loguru import logger

from .colors import DEFAULT_RESOLVER, ColorResolver
from .errors import LoadFailure
from .geo_join import DEFAULT_ID_PROPERTY, JoinCache
from .models import ResultRecord
from .summary import Summary, summarize
from .view_state import (
    BackToOverview,
    ConstituencySelected,
    PointerMoved,
    SelectionCleared,
    ViewportChanged,
    ViewState,
    ViewToggled,
    Viewport,
    WardRequest,
    WardsLoaded,
    WardsLoadFailed,
    apply,
)

WardLoader = Callable[[str], Mapping[str, Any]]


class ViewStateController:
    """
    Holds the map's ViewState and performs ward loads for drill-downs.

    The controller is the only place the state changes; every change goes
    through the reducer so transitions can be tested without it.

    Example:
        controller = ViewStateController(ward_loader=repository.load_wards)
        controller.select(feature["properties"])   # loads wards, may drill down
        controller.back()                          # returns to the overview
    """

    def __init__(
        self,
        ward_loader: Optional[WardLoader] = None,
        initial_state: Optional[ViewState] = None,
    ):
        self.ward_loader = ward_loader
        self.state = initial_state or ViewState()

    def dispatch(self, event: Any) -> ViewState:
        self.state = apply(self.state, event)
        return self.state

    def hover(self, properties: Optional[Mapping[str, Any]]) -> ViewState:
        return self.dispatch(PointerMoved(properties))

    def request_wards(self, properties: Mapping[str, Any]) -> Optional[WardRequest]:
        """
        Select a constituency and issue a ward request without loading it.

        Returns the request to complete with ``complete_wards`` or
        ``fail_wards``, or None when the selection was ignored.
        """
        before = self.state.request_seq
        self.dispatch(ConstituencySelected(properties))
        if self.state.request_seq == before:
            return None
        return self.state.pending_request

    def complete_wards(self, request_id: int, wards: Mapping[str, Any]) -> ViewState:
        return self.dispatch(WardsLoaded(request_id, wards))

    def fail_wards(self, request_id: int, reason: str) -> ViewState:
        return self.dispatch(WardsLoadFailed(request_id, reason))

    def select(self, properties: Mapping[str, Any]) -> ViewState:
        """
        Select a constituency and drill down into its wards.

        A ward load failure is recorded on the state (``last_error``) and
        leaves the map in the overview with the constituency selected.
        """
        request = self.request_wards(properties)
        if request is None:
            return self.state
        if self.ward_loader is None:
            return self.fail_wards(request.request_id, "No ward data source configured")

        try:
            wards = self.ward_loader(request.constituency_name)
        except LoadFailure as e:
            logger.warning(f"⚠️ No ward data found for {request.constituency_name}: {e.reason}")
            return self.fail_wards(request.request_id, str(e))

        logger.info(
            f"🔍 Drilling into {request.constituency_name} "
            f"({len(wards.get('features') or [])} wards)"
        )
        return self.complete_wards(request.request_id, wards)

    def clear_selection(self) -> ViewState:
        return self.dispatch(SelectionCleared())

    def back(self) -> ViewState:
        return self.dispatch(BackToOverview())

    def move(self, viewport: Viewport) -> ViewState:
        return self.dispatch(ViewportChanged(viewport))

    def toggle_view(self, view: str) -> ViewState:
        return self.dispatch(ViewToggled(view))

    def active_layer(self, overview: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
        """Ward collection while drilled down, otherwise the overview layer."""
        if self.state.drill_down_active and self.state.active_wards is not None:
            return self.state.active_wards
        return overview


class DashboardSession:
    """
    Data side of the dashboard.

    Results and boundaries load independently. The overview layer exists as
    soon as boundaries are in; until results arrive (or if they fail) every
    constituency carries the no-data color.
    """

    def __init__(
        self,
        controller: Optional[ViewStateController] = None,
        resolver: ColorResolver = DEFAULT_RESOLVER,
        id_property: str = DEFAULT_ID_PROPERTY,
    ):
        self.controller = controller or ViewStateController()
        self.resolver = resolver
        self.results: Optional[Mapping[int, ResultRecord]] = None
        self.boundaries: Optional[Mapping[str, Any]] = None
        self.errors: Dict[str, str] = {}
        self._join = JoinCache(resolver=resolver, id_property=id_property)

    def results_loaded(self, results: Mapping[int, ResultRecord]) -> None:
        self.results = results
        self.errors.pop("results", None)

    def results_failed(self, error: LoadFailure) -> None:
        logger.error(f"❌ Error loading election results: {error}")
        self.results = None
        self.errors["results"] = str(error)

    def boundaries_loaded(self, boundaries: Mapping[str, Any]) -> None:
        self.boundaries = boundaries
        self.errors.pop("boundaries", None)

    def boundaries_failed(self, error: LoadFailure) -> None:
        logger.error(f"❌ Error loading GeoJSON: {error}")
        self.boundaries = None
        self.errors["boundaries"] = str(error)

    def overview_layer(self) -> Optional[Dict[str, Any]]:
        if self.boundaries is None:
            return None
        return self._join.get(self.boundaries, self.results)

    def active_layer(self) -> Optional[Mapping[str, Any]]:
        return self.controller.active_layer(self.overview_layer())

    def summary(self) -> Optional[Summary]:
        return summarize(self.results)
