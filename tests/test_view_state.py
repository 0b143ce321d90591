import pytest

from dashboard.bounds import Bounds
from dashboard.view_state import (
    DEFAULT_VIEWPORT,
    SUMMARY_VIEW,
    BackToOverview,
    ConstituencySelected,
    PointerMoved,
    SelectionCleared,
    ViewportChanged,
    ViewState,
    ViewToggled,
    Viewport,
    WardsLoaded,
    WardsLoadFailed,
    apply,
)

LUSAKA = {"ConstNo": 1, "ConstName": "Lusaka Central"}
KABWATA = {"ConstNo": 2, "ConstName": "Kabwata"}


def run(state, *events):
    for event in events:
        state = apply(state, event)
    return state


def test_selection_leaves_hover_alone():
    state = run(ViewState(), PointerMoved(KABWATA), ConstituencySelected(LUSAKA))
    assert state.hovered == KABWATA
    assert state.selected == LUSAKA


def test_clearing_selection_keeps_hover_and_vice_versa():
    state = run(ViewState(), PointerMoved(KABWATA), ConstituencySelected(LUSAKA))

    cleared_selection = apply(state, SelectionCleared())
    assert cleared_selection.selected is None
    assert cleared_selection.hovered == KABWATA

    cleared_hover = apply(state, PointerMoved(None))
    assert cleared_hover.hovered is None
    assert cleared_hover.selected == LUSAKA


def test_selection_issues_ward_request():
    state = apply(ViewState(), ConstituencySelected(LUSAKA))
    assert state.pending_request.request_id == 1
    assert state.pending_request.constituency_name == "Lusaka Central"
    assert state.mode == "overview"


def test_successful_load_enters_drill_down_with_fit(wards):
    state = run(ViewState(), ConstituencySelected(LUSAKA), WardsLoaded(1, wards))

    assert state.drill_down_active
    assert state.mode == "drilldown"
    assert state.active_wards is wards
    assert state.ward_count == 2
    assert state.pending_request is None
    assert state.fit_request.bounds == Bounds(28.25, -15.45, 28.35, -15.35)
    assert state.fit_request.padding == 50
    assert state.fit_request.duration_ms == 1000


def test_precomputed_bounds_take_priority(wards):
    selected = dict(LUSAKA, bounds=[[28.0, -16.0], [29.0, -15.0]])
    state = run(ViewState(), ConstituencySelected(selected), WardsLoaded(1, wards))
    assert state.fit_request.bounds == Bounds(28.0, -16.0, 29.0, -15.0)


def test_empty_ward_set_keeps_viewport():
    empty = {"type": "FeatureCollection", "features": []}
    state = run(ViewState(), ConstituencySelected(LUSAKA), WardsLoaded(1, empty))
    assert state.drill_down_active
    assert state.fit_request is None
    assert state.viewport == DEFAULT_VIEWPORT


def test_failed_load_stays_in_overview_with_viewport_unchanged():
    moved = Viewport(longitude=30.0, latitude=-12.0, zoom=7)
    state = run(
        ViewState(),
        ViewportChanged(moved),
        ConstituencySelected(LUSAKA),
        WardsLoadFailed(1, "file not found"),
    )

    assert state.mode == "overview"
    assert not state.drill_down_active
    assert state.viewport == moved
    assert state.active_wards is None
    assert state.pending_request is None
    assert state.last_error == "file not found"
    assert state.selected == LUSAKA


def test_last_request_wins(wards):
    other_wards = {"type": "FeatureCollection", "features": wards["features"][:1]}
    state = run(
        ViewState(),
        ConstituencySelected(LUSAKA),
        ConstituencySelected(KABWATA),
        WardsLoaded(2, other_wards),
        WardsLoaded(1, wards),
    )
    assert state.active_wards is other_wards
    assert state.selected == KABWATA


def test_stale_failure_is_ignored(wards):
    state = run(
        ViewState(),
        ConstituencySelected(LUSAKA),
        ConstituencySelected(KABWATA),
        WardsLoadFailed(1, "timeout"),
    )
    assert state.pending_request.request_id == 2
    assert state.last_error is None


def test_back_resets_to_default_overview(wards):
    state = run(
        ViewState(),
        PointerMoved(KABWATA),
        ConstituencySelected(LUSAKA),
        WardsLoaded(1, wards),
        ViewportChanged(Viewport(28.3, -15.4, 11)),
        BackToOverview(),
    )
    assert state.mode == "overview"
    assert state.viewport == DEFAULT_VIEWPORT
    assert state.selected is None
    assert state.hovered is None
    assert state.active_wards is None
    assert state.fit_request is None


def test_constituency_events_ignored_while_drilled_down(wards):
    drilled = run(ViewState(), ConstituencySelected(LUSAKA), WardsLoaded(1, wards))
    assert apply(drilled, ConstituencySelected(KABWATA)) is drilled
    assert apply(drilled, PointerMoved(KABWATA)) is drilled


def test_viewport_change_consumes_fit_request(wards):
    drilled = run(ViewState(), ConstituencySelected(LUSAKA), WardsLoaded(1, wards))
    moved = apply(drilled, ViewportChanged(Viewport(28.3, -15.4, 11)))
    assert moved.fit_request is None
    assert moved.viewport.zoom == 11


def test_transitions_do_not_mutate_previous_state():
    before = ViewState()
    after = apply(before, ConstituencySelected(LUSAKA))
    assert before.selected is None
    assert before.request_seq == 0
    assert after is not before


def test_view_toggle():
    state = apply(ViewState(), ViewToggled(SUMMARY_VIEW))
    assert state.active_view == SUMMARY_VIEW
    with pytest.raises(ValueError):
        apply(state, ViewToggled("table"))


def test_unknown_event():
    with pytest.raises(TypeError):
        apply(ViewState(), object())


def test_snapshot(wards):
    state = run(ViewState(), ConstituencySelected(LUSAKA), WardsLoaded(1, wards))
    snapshot = state.snapshot()
    assert snapshot["mode"] == "drilldown"
    assert snapshot["drillDownActive"] is True
    assert snapshot["wardCount"] == 2
    assert snapshot["selected"] == LUSAKA
    assert snapshot["fitBounds"] == ((28.25, -15.45), (28.35, -15.35))
    assert snapshot["viewport"] == {"longitude": 28.3, "latitude": -13.5, "zoom": 5.5}
