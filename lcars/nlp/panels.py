"""Multi-view panel dispatcher: tag list -> grid layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

MAX_PANELS = 4

PANEL_TITLES: dict[str, str] = {
    "tasks": "Task Manager",
    "weather": "Weather",
    "calendar": "Calendar",
    "analytics": "Analytics",
    "space": "Space Exploration",
    "travel": "Travel Calculator",
    "notifications": "Notifications",
    "terminal": "Terminal",
    "ai": "AI Chat",
}

# panel count -> grid columns; four panels render as a 2x2 grid
_GRID_COLUMNS = {1: 1, 2: 2, 3: 3, 4: 2}

OK = "ok"
NO_PANELS = "no_panels"
INVALID_PANELS = "invalid_panels"

_EXAMPLES = [
    "Computer show me weather and tasks",
    "Computer give me analytics and calendar",
    "Computer display weather, tasks, and analytics",
]


@dataclass
class PanelLayout:
    state: str
    panels: list[dict[str, str]] = field(default_factory=list)
    columns: int = 0
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.state == OK

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "state": self.state,
            "panels": self.panels,
            "columns": self.columns,
            "count": len(self.panels),
        }
        if self.message:
            d["message"] = self.message
            d["examples"] = list(_EXAMPLES)
        return d


def parse_panels_param(raw: str | None) -> list[str]:
    """Split a ``panels=a,b,c`` query value, dropping blanks."""
    if not raw:
        return []
    return [p.strip().lower() for p in raw.split(",") if p.strip()]


def dispatch_panels(tags: Iterable[str]) -> PanelLayout:
    """Deduplicate, cap at four, drop unknown tags, and pick a grid.

    Truncation happens before unknown tags are filtered, so a request whose
    first four distinct tags are all unknown yields INVALID_PANELS.
    """
    requested: list[str] = []
    for tag in tags:
        if tag and tag not in requested:
            requested.append(tag)
    requested = requested[:MAX_PANELS]

    valid = [t for t in requested if t in PANEL_TITLES]
    if not valid:
        if not requested:
            return PanelLayout(NO_PANELS, message="No panels were specified for multi-view mode.")
        return PanelLayout(INVALID_PANELS, message="The requested panels were not recognized.")

    return PanelLayout(
        OK,
        panels=[{"tag": t, "title": PANEL_TITLES[t]} for t in valid],
        columns=_GRID_COLUMNS[len(valid)],
    )
