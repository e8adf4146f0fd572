from __future__ import annotations

import pytest

from lcars.nlp.panels import INVALID_PANELS, NO_PANELS, OK, dispatch_panels, parse_panels_param


class TestParsePanelsParam:
    def test_splits_and_trims(self) -> None:
        assert parse_panels_param(" Weather, tasks ,,analytics ") == ["weather", "tasks", "analytics"]

    @pytest.mark.parametrize("raw", [None, "", ",,"])
    def test_blank(self, raw) -> None:
        assert parse_panels_param(raw) == []


class TestDispatchPanels:
    @pytest.mark.parametrize(
        ("tags", "columns"),
        [
            (["tasks"], 1),
            (["tasks", "weather"], 2),
            (["tasks", "weather", "analytics"], 3),
            (["tasks", "weather", "analytics", "calendar"], 2),
        ],
    )
    def test_grid_columns(self, tags: list[str], columns: int) -> None:
        layout = dispatch_panels(tags)
        assert layout.state == OK
        assert layout.columns == columns
        assert [p["tag"] for p in layout.panels] == tags

    def test_titles(self) -> None:
        layout = dispatch_panels(["space", "travel", "ai"])
        assert [p["title"] for p in layout.panels] == ["Space Exploration", "Travel Calculator", "AI Chat"]

    def test_duplicates_removed(self) -> None:
        layout = dispatch_panels(["tasks", "tasks", "weather"])
        assert [p["tag"] for p in layout.panels] == ["tasks", "weather"]

    def test_capped_at_four(self) -> None:
        layout = dispatch_panels(["tasks", "weather", "calendar", "analytics", "space"])
        assert len(layout.panels) == 4

    def test_unknown_tags_dropped(self) -> None:
        layout = dispatch_panels(["bogus", "weather"])
        assert layout.ok
        assert [p["tag"] for p in layout.panels] == ["weather"]

    def test_only_unknown_is_invalid(self) -> None:
        layout = dispatch_panels(["bogus"])
        assert layout.state == INVALID_PANELS
        assert layout.panels == []
        assert not layout.ok

    def test_truncation_happens_before_filtering(self) -> None:
        layout = dispatch_panels(["a", "b", "c", "d", "weather"])
        assert layout.state == INVALID_PANELS

    def test_empty_is_no_panels(self) -> None:
        layout = dispatch_panels([])
        assert layout.state == NO_PANELS
        data = layout.to_dict()
        assert data["count"] == 0
        assert data["message"]
        assert data["examples"]
