"""In-memory record stores for tasks, calendar, notifications, settings, and logs.

Nothing here is durable: a ``Storage`` lives as long as the process (or the
test) that built it. Ids are sequential integers per record type, starting
at 1. Records are plain dicts so they serialize straight to JSON.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable

logger = logging.getLogger("lcars.store")

TASK_PRIORITIES = ("low", "medium", "high")
TASK_STATUSES = ("active", "completed")
EVENT_TYPES = ("event", "meeting", "reminder")
NOTIFICATION_TYPES = ("info", "success", "warning", "danger")
ROUTE_MODES = ("driving", "walking", "transit")

SETTINGS_DEFAULTS: dict[str, Any] = {
    "voice_recognition": True,
    "text_to_speech": True,
    "sound_effects": True,
    "desktop_notifications": True,
    "task_reminders": True,
    "default_city": "New York",
    "theme": "dark",
}

DEFAULT_USER = "default_user"


class RecordStore:
    """Map of id -> record with an auto-increment counter."""

    def __init__(self, name: str, clock: Callable[[], datetime] = datetime.now) -> None:
        self.name = name
        self._records: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self._clock = clock

    def list(self, sort_key: str = "created_at", reverse: bool = True) -> list[dict[str, Any]]:
        return sorted(
            (dict(r) for r in self._records.values()),
            key=lambda r: (str(r.get(sort_key) or ""), r["id"]),
            reverse=reverse,
        )

    def get(self, record_id: int) -> dict[str, Any] | None:
        rec = self._records.get(record_id)
        return dict(rec) if rec else None

    def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        record = {"id": self._next_id, **fields}
        record.setdefault("created_at", self._clock().isoformat())
        self._records[record["id"]] = record
        self._next_id += 1
        logger.info("Created %s #%d", self.name, record["id"])
        return dict(record)

    def update(self, record_id: int, **fields: Any) -> dict[str, Any] | None:
        rec = self._records.get(record_id)
        if rec is None:
            return None
        fields.pop("id", None)
        rec.update(fields)
        return dict(rec)

    def delete(self, record_id: int) -> bool:
        removed = self._records.pop(record_id, None) is not None
        if removed:
            logger.info("Deleted %s #%d", self.name, record_id)
        return removed

    def __len__(self) -> int:
        return len(self._records)


# ------------------------------------------------------------------
# Field normalization
# ------------------------------------------------------------------

def _require_text(body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} is required")
    return value.strip()


def _choice(body: dict[str, Any], key: str, allowed: tuple[str, ...], default: str) -> str:
    value = body.get(key) or default
    if value not in allowed:
        raise ValueError(f"{key} must be one of {', '.join(allowed)}")
    return value


def _timestamp(value: Any, key: str, required: bool = True) -> str | None:
    """Accept ISO date/datetime strings or date objects; return ISO text."""
    if value in (None, ""):
        if required:
            raise ValueError(f"{key} is required")
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time()).isoformat()
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).isoformat()
        except ValueError:
            raise ValueError(f"{key} must be an ISO date or datetime") from None
    raise ValueError(f"{key} must be an ISO date or datetime")


def normalize_task(body: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": _require_text(body, "title"),
        "description": str(body.get("description") or ""),
        "priority": _choice(body, "priority", TASK_PRIORITIES, "medium"),
        "status": _choice(body, "status", TASK_STATUSES, "active"),
        "due_date": _timestamp(body.get("due_date"), "due_date"),
        "completed_at": None,
    }


def normalize_event(body: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": _require_text(body, "title"),
        "description": str(body.get("description") or ""),
        "start_date": _timestamp(body.get("start_date"), "start_date"),
        "end_date": _timestamp(body.get("end_date"), "end_date", required=False),
        "location": str(body.get("location") or ""),
        "type": _choice(body, "type", EVENT_TYPES, "event"),
    }


def normalize_notification(body: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": _require_text(body, "title"),
        "message": _require_text(body, "message"),
        "type": _choice(body, "type", NOTIFICATION_TYPES, "info"),
        "read": False,
    }


def normalize_route(body: dict[str, Any]) -> dict[str, Any]:
    waypoints = body.get("waypoints") or []
    if not isinstance(waypoints, list):
        raise ValueError("waypoints must be a list")
    return {
        "name": _require_text(body, "name"),
        "origin": _require_text(body, "origin"),
        "destination": _require_text(body, "destination"),
        "waypoints": [str(w) for w in waypoints],
        "distance": str(body.get("distance") or ""),
        "duration": str(body.get("duration") or ""),
        "mode": _choice(body, "mode", ROUTE_MODES, "driving"),
    }


# ------------------------------------------------------------------
# Aggregate storage
# ------------------------------------------------------------------

class Storage:
    """All LCARS Console records behind one injectable object."""

    def __init__(
        self,
        *,
        default_city: str = "New York",
        seed: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._default_city = default_city
        self.tasks = RecordStore("task", clock)
        self.events = RecordStore("calendar event", clock)
        self.notifications = RecordStore("notification", clock)
        self.conversations = RecordStore("conversation", clock)
        self.analytics = RecordStore("analytics", clock)
        self.routes = RecordStore("travel route", clock)
        self._settings: dict[str, dict[str, Any]] = {}
        self._next_settings_id = 1
        if seed:
            self._seed()

    def _seed(self) -> None:
        now = self._clock()
        self.create_task({
            "title": "Complete LCARS Console Setup",
            "description": "Finish restructuring the LCARS AI Console",
            "priority": "high",
            "due_date": (now + timedelta(days=2)).isoformat(),
        })
        self.create_task({
            "title": "Test All Features",
            "description": "Verify voice, weather, travel, and all interactions",
            "priority": "high",
            "due_date": (now + timedelta(days=1)).isoformat(),
        })
        self.update_settings({})
        self.create_analytics({"date": now.isoformat(), "productivity_score": 75})
        self.create_notification({
            "title": "Welcome to LCARS Console",
            "message": "All systems online. Ready for mission objectives.",
            "type": "success",
        })

    # -- tasks ---------------------------------------------------------

    def get_tasks(self) -> list[dict[str, Any]]:
        return self.tasks.list()

    def get_task(self, task_id: int) -> dict[str, Any] | None:
        return self.tasks.get(task_id)

    def create_task(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.tasks.create(normalize_task(body))

    def update_task(self, task_id: int, body: dict[str, Any]) -> dict[str, Any] | None:
        allowed = {"title", "description", "priority", "status", "due_date"}
        updates = {k: v for k, v in body.items() if k in allowed}
        current = self.tasks.get(task_id)
        if current is None:
            return None
        merged = normalize_task({**current, **updates})
        merged["completed_at"] = current.get("completed_at")
        return self.tasks.update(task_id, **merged)

    def delete_task(self, task_id: int) -> bool:
        return self.tasks.delete(task_id)

    def complete_task(self, task_id: int) -> dict[str, Any] | None:
        return self.tasks.update(task_id, status="completed", completed_at=self._clock().isoformat())

    def task_stats(self) -> dict[str, int]:
        tasks = self.get_tasks()
        active = [t for t in tasks if t["status"] == "active"]
        completed = [t for t in tasks if t["status"] == "completed"]
        today = self._clock().date().isoformat()
        completed_today = [t for t in completed if (t.get("completed_at") or "")[:10] == today]
        score = round(len(completed) / len(tasks) * 100) if tasks else 0
        return {
            "active_tasks": len(active),
            "completed_tasks": len(completed),
            "completed_today": len(completed_today),
            "productivity_score": score,
        }

    # -- calendar ------------------------------------------------------

    def get_calendar_events(self) -> list[dict[str, Any]]:
        return self.events.list(sort_key="start_date", reverse=False)

    def get_calendar_event(self, event_id: int) -> dict[str, Any] | None:
        return self.events.get(event_id)

    def create_calendar_event(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.events.create(normalize_event(body))

    def delete_calendar_event(self, event_id: int) -> bool:
        return self.events.delete(event_id)

    # -- analytics -----------------------------------------------------

    def get_analytics(self) -> list[dict[str, Any]]:
        return self.analytics.list(sort_key="date")

    def create_analytics(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.analytics.create({
            "date": body.get("date") or self._clock().isoformat(),
            "tasks_completed": int(body.get("tasks_completed") or 0),
            "productivity_score": int(body.get("productivity_score") or 0),
            "ai_interactions": int(body.get("ai_interactions") or 0),
            "commands_executed": int(body.get("commands_executed") or 0),
            "metadata": dict(body.get("metadata") or {}),
        })

    def get_latest_analytics(self) -> dict[str, Any] | None:
        rows = self.get_analytics()
        return rows[0] if rows else None

    def record_command(self) -> dict[str, Any]:
        """Bump ``commands_executed`` on the latest analytics row."""
        latest = self.get_latest_analytics() or self.create_analytics({})
        return self.analytics.update(latest["id"], commands_executed=latest["commands_executed"] + 1)

    # -- settings ------------------------------------------------------

    def get_settings(self, user_id: str = DEFAULT_USER) -> dict[str, Any]:
        settings = self._settings.get(user_id)
        if settings is None:
            settings = self.update_settings({}, user_id)
        return dict(settings)

    def update_settings(self, body: dict[str, Any], user_id: str = DEFAULT_USER) -> dict[str, Any]:
        existing = self._settings.get(user_id)
        if existing is None:
            existing = {
                "id": self._next_settings_id,
                "user_id": user_id,
                **SETTINGS_DEFAULTS,
                "default_city": self._default_city,
            }
            self._next_settings_id += 1
        merged = dict(existing)
        for key in SETTINGS_DEFAULTS:
            if body.get(key) is not None:
                merged[key] = body[key]
        merged["updated_at"] = self._clock().isoformat()
        self._settings[user_id] = merged
        return dict(merged)

    # -- notifications -------------------------------------------------

    def get_notifications(self) -> list[dict[str, Any]]:
        return self.notifications.list()

    def create_notification(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.notifications.create(normalize_notification(body))

    def mark_notification_read(self, notification_id: int) -> dict[str, Any] | None:
        return self.notifications.update(notification_id, read=True)

    def delete_notification(self, notification_id: int) -> bool:
        return self.notifications.delete(notification_id)

    def mark_all_notifications_read(self) -> bool:
        for n in self.notifications.list():
            self.notifications.update(n["id"], read=True)
        return True

    # -- conversations -------------------------------------------------

    def get_conversations(self) -> list[dict[str, Any]]:
        return self.conversations.list()

    def create_conversation(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.conversations.create({
            "message": _require_text(body, "message"),
            "response": str(body.get("response") or ""),
            "sentiment": body.get("sentiment") or "neutral",
            "sentiment_score": int(body.get("sentiment_score") or 0),
            "intent": body.get("intent") or "general",
        })

    # -- travel routes -------------------------------------------------

    def get_travel_routes(self) -> list[dict[str, Any]]:
        return self.routes.list()

    def create_travel_route(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.routes.create(normalize_route(body))

    def delete_travel_route(self, route_id: int) -> bool:
        return self.routes.delete(route_id)
