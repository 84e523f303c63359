"""Tests for roadbrowser.services.state."""

import pytest
from pydantic import ValidationError

from roadbrowser.services.models import GeoPoint, NamedLocation, RoadDetail
from roadbrowser.services.state import ResolutionController


def _detail(name="国道6号", start=(36.0, 140.0), end=(36.2, 140.2)):
    return RoadDetail(
        name=name,
        length_km=10.0,
        lane_counts=frozenset({2}),
        start=NamedLocation(coordinate=GeoPoint(lat=start[0], lng=start[1])),
        end=NamedLocation(coordinate=GeoPoint(lat=end[0], lng=end[1])),
        route_geometry={},
    )


class TestInitialState:
    def test_defaults(self):
        state = ResolutionController().state
        assert state.is_loading is False
        assert state.road_names is None
        assert state.current_detail is None
        assert state.map_view.zoom == 13
        assert state.map_view.center == GeoPoint(lat=36.0824938, lng=140.0958208)

    def test_snapshot_is_frozen(self):
        state = ResolutionController().state
        with pytest.raises(ValidationError):
            state.is_loading = True


class TestLoading:
    def test_begin_and_end(self):
        c = ResolutionController()
        c.begin_loading()
        assert c.state.is_loading is True
        c.end_loading()
        assert c.state.is_loading is False

    def test_overlapping_resolutions(self):
        c = ResolutionController()
        c.begin_loading()
        c.begin_loading()
        c.end_loading()
        assert c.state.is_loading is True
        c.end_loading()
        assert c.state.is_loading is False

    def test_unbalanced_end_does_not_go_negative(self):
        c = ResolutionController()
        c.end_loading()
        c.begin_loading()
        assert c.state.is_loading is True


class TestCommits:
    def test_commit_road_list(self):
        c = ResolutionController()
        c.commit_road_list(["a", "b", "a"])
        assert c.state.road_names == frozenset({"a", "b"})

    def test_commit_detail_replaces_and_recenters(self):
        c = ResolutionController()
        c.update_map_view(zoom=15)
        before = c.state
        detail = _detail()
        assert c.commit_road_detail(detail, GeoPoint(lat=36.1, lng=140.1)) is True
        assert c.state.current_detail is detail
        assert c.state.map_view.center == GeoPoint(lat=36.1, lng=140.1)
        assert c.state.map_view.zoom == 15
        # old snapshot untouched
        assert before.current_detail is None

    def test_last_settled_wins_by_default(self):
        c = ResolutionController()
        old_token = c.issue_token()
        c.issue_token()
        assert c.commit_road_detail(_detail("old"), GeoPoint(lat=0, lng=0), token=old_token)
        assert c.state.current_detail.name == "old"

    def test_superseded_token_discarded_when_enabled(self):
        c = ResolutionController(discard_superseded=True)
        old_token = c.issue_token()
        new_token = c.issue_token()
        assert c.commit_road_detail(_detail("new"), GeoPoint(lat=1, lng=1), token=new_token)
        assert not c.commit_road_detail(_detail("old"), GeoPoint(lat=0, lng=0), token=old_token)
        assert c.state.current_detail.name == "new"
        assert c.state.map_view.center == GeoPoint(lat=1, lng=1)


class TestMapView:
    def test_pan_keeps_zoom(self):
        c = ResolutionController()
        view = c.update_map_view(center=GeoPoint(lat=1.0, lng=2.0))
        assert view.zoom == 13
        assert c.state.map_view.center == GeoPoint(lat=1.0, lng=2.0)

    def test_zoom_keeps_center(self):
        c = ResolutionController()
        center = c.state.map_view.center
        c.update_map_view(zoom=16)
        assert c.state.map_view.zoom == 16
        assert c.state.map_view.center == center
