#!/usr/bin/env python3
"""LCARS Console API -- FastAPI app for tasks, calendar, services and the AI console.

Run with:
    python3 -m uvicorn lcars.dashboard.app:app --host 0.0.0.0 --port 5000
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lcars.chat.routes import router as chat_router
from lcars.common.config import setup_logging
from lcars.common.state import get_state
from lcars.monitor import system
from lcars.services import maps, space
from lcars.services.http import ServiceError
from lcars.services.weather import display_temp

logger = logging.getLogger("lcars.dashboard")

app = FastAPI(title="LCARS Console", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


@app.on_event("startup")
async def _startup() -> None:
    setup_logging(get_state().config)
    logger.info("LCARS Console API online")


async def _body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _not_found(what: str) -> JSONResponse:
    return JSONResponse({"error": f"{what} not found"}, status_code=404)


def _create(create: Callable[[dict[str, Any]], dict[str, Any]], body: dict[str, Any]) -> JSONResponse:
    try:
        record = create(body)
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    return JSONResponse(record, status_code=201)


def _timeout() -> float:
    return float(get_state().config["timeouts"]["http"])


# ══════════════════════════════════════════════════════════════════════════════
#  Tasks
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/api/tasks")
async def api_tasks() -> JSONResponse:
    return JSONResponse(get_state().storage.get_tasks())


@app.get("/api/tasks/stats")
async def api_task_stats() -> JSONResponse:
    return JSONResponse(get_state().storage.task_stats())


@app.post("/api/tasks")
async def api_create_task(request: Request) -> JSONResponse:
    return _create(get_state().storage.create_task, await _body(request))


@app.patch("/api/tasks/{task_id}")
async def api_update_task(task_id: int, request: Request) -> JSONResponse:
    try:
        task = get_state().storage.update_task(task_id, await _body(request))
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    if task is None:
        return _not_found("Task")
    return JSONResponse(task)


@app.patch("/api/tasks/{task_id}/complete")
async def api_complete_task(task_id: int) -> JSONResponse:
    task = get_state().storage.complete_task(task_id)
    if task is None:
        return _not_found("Task")
    return JSONResponse(task)


@app.delete("/api/tasks/{task_id}")
async def api_delete_task(task_id: int) -> JSONResponse:
    if not get_state().storage.delete_task(task_id):
        return _not_found("Task")
    return JSONResponse({"success": True})


# ══════════════════════════════════════════════════════════════════════════════
#  Calendar
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/api/calendar/events")
async def api_calendar_events() -> JSONResponse:
    return JSONResponse(get_state().storage.get_calendar_events())


@app.post("/api/calendar/events")
async def api_create_calendar_event(request: Request) -> JSONResponse:
    return _create(get_state().storage.create_calendar_event, await _body(request))


@app.delete("/api/calendar/events/{event_id}")
async def api_delete_calendar_event(event_id: int) -> JSONResponse:
    if not get_state().storage.delete_calendar_event(event_id):
        return _not_found("Event")
    return JSONResponse({"success": True})


# ══════════════════════════════════════════════════════════════════════════════
#  Weather, space and travel (third-party pass-throughs)
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/api/weather")
async def api_weather(city: str = "") -> JSONResponse:
    state = get_state()
    city = city.strip() or state.storage.get_settings().get("default_city") or state.config["default_city"]
    try:
        report = await asyncio.to_thread(state.weather.current, city)
    except ServiceError as exc:
        logger.warning("Weather lookup failed for %s: %s", city, exc)
        return JSONResponse({"error": str(exc)}, status_code=500)
    return JSONResponse(report.to_dict())


@app.get("/api/weather/current")
async def api_weather_current() -> JSONResponse:
    """Compact current conditions for the status bar; degrades instead of erroring out."""
    state = get_state()
    city = state.storage.get_settings().get("default_city") or state.config["default_city"]
    try:
        report = await asyncio.to_thread(state.weather.current, city)
    except ServiceError as exc:
        logger.warning("Current weather unavailable: %s", exc)
        return JSONResponse({"temp": "--", "condition": "Loading...", "city": "Unknown"}, status_code=500)
    return JSONResponse({"temp": display_temp(report.temp), "condition": report.condition, "city": report.city})


@app.get("/api/nasa/apod")
async def api_nasa_apod() -> JSONResponse:
    try:
        apod = await asyncio.to_thread(space.get_apod, _timeout())
    except ServiceError as exc:
        logger.warning("APOD fetch failed: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=500)
    return JSONResponse(apod.to_dict())


@app.get("/api/iss/location")
async def api_iss_location() -> JSONResponse:
    try:
        position = await asyncio.to_thread(space.get_iss_position, _timeout())
    except ServiceError as exc:
        logger.warning("ISS fetch failed: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=500)
    return JSONResponse(position.to_dict())


@app.get("/api/travel/route")
async def api_travel_route(origin: str = "", destination: str = "", mode: str = "driving") -> JSONResponse:
    if not origin.strip() or not destination.strip():
        return JSONResponse({"error": "origin and destination are required"}, status_code=400)
    try:
        route = await asyncio.to_thread(
            maps.calculate_route, origin.strip(), destination.strip(), mode, _timeout(),
        )
    except ServiceError as exc:
        logger.warning("Route %s -> %s failed: %s", origin, destination, exc)
        return JSONResponse({"error": str(exc)}, status_code=500)

    payload = route.to_dict()
    if not route.api_available:
        payload["error"] = "Travel routing not configured (set TOMTOM_API_KEY)"
    return JSONResponse(payload)


@app.get("/api/travel/routes")
async def api_travel_routes() -> JSONResponse:
    return JSONResponse(get_state().storage.get_travel_routes())


@app.post("/api/travel/routes")
async def api_create_travel_route(request: Request) -> JSONResponse:
    return _create(get_state().storage.create_travel_route, await _body(request))


@app.delete("/api/travel/routes/{route_id}")
async def api_delete_travel_route(route_id: int) -> JSONResponse:
    if not get_state().storage.delete_travel_route(route_id):
        return _not_found("Route")
    return JSONResponse({"success": True})


# ══════════════════════════════════════════════════════════════════════════════
#  Analytics and conversations
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/api/analytics/stats")
async def api_analytics_stats() -> JSONResponse:
    storage = get_state().storage
    stats = storage.task_stats()
    latest = storage.get_latest_analytics() or {}
    conversations = storage.get_conversations()
    return JSONResponse({
        **stats,
        "ai_interactions": len(conversations),
        "commands_executed": latest.get("commands_executed", 0),
        "history": storage.get_analytics(),
    })


@app.get("/api/conversations")
async def api_conversations(limit: int = 50) -> JSONResponse:
    return JSONResponse(get_state().storage.get_conversations()[:max(limit, 0)])


# ══════════════════════════════════════════════════════════════════════════════
#  Notifications
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/api/notifications")
async def api_notifications() -> JSONResponse:
    return JSONResponse(get_state().storage.get_notifications())


@app.post("/api/notifications")
async def api_create_notification(request: Request) -> JSONResponse:
    return _create(get_state().storage.create_notification, await _body(request))


@app.post("/api/notifications/mark-all-read")
async def api_mark_all_notifications_read() -> JSONResponse:
    get_state().storage.mark_all_notifications_read()
    return JSONResponse({"success": True})


@app.patch("/api/notifications/{notification_id}/read")
async def api_mark_notification_read(notification_id: int) -> JSONResponse:
    notification = get_state().storage.mark_notification_read(notification_id)
    if notification is None:
        return _not_found("Notification")
    return JSONResponse(notification)


@app.delete("/api/notifications/{notification_id}")
async def api_delete_notification(notification_id: int) -> JSONResponse:
    if not get_state().storage.delete_notification(notification_id):
        return _not_found("Notification")
    return JSONResponse({"success": True})


# ══════════════════════════════════════════════════════════════════════════════
#  Settings and system
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/api/settings")
async def api_get_settings() -> JSONResponse:
    return JSONResponse(get_state().storage.get_settings())


@app.put("/api/settings")
async def api_update_settings(request: Request) -> JSONResponse:
    body = await _body(request)
    if not body:
        return JSONResponse({"error": "Settings body must be a JSON object"}, status_code=400)
    settings = get_state().storage.update_settings(body)
    logger.info("Settings updated: %s", ", ".join(sorted(body)))
    return JSONResponse(settings)


@app.get("/api/system/status")
async def api_system_status() -> JSONResponse:
    try:
        data = await asyncio.to_thread(system.snapshot)
    except Exception as exc:
        logger.exception("System snapshot failed")
        return JSONResponse({"error": str(exc)}, status_code=500)
    state = get_state()
    data["ai_module"] = "READY" if state.chat_backend.configured else "LOCAL"
    return JSONResponse(data)
