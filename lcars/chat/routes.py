"""FastAPI router for the AI console -- chat, voice commands, multi-view, terminal."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from lcars.agents.llm_provider import AI_ALTERNATIVES
from lcars.common.guards import RateLimiter, RateLimitExceeded, parse_error, validate_message
from lcars.common.state import ConsoleState, get_state
from lcars.nlp.intent import MULTI_VIEW, classify, strip_wake_word
from lcars.nlp.panels import dispatch_panels, parse_panels_param
from lcars.nlp.sentiment import score_sentiment

logger = logging.getLogger("lcars.chat.routes")

router = APIRouter(prefix="/api", tags=["chat"])

NOT_CONFIGURED_MESSAGE = (
    "Add ANTHROPIC_API_KEY to the environment (or set chat.provider in config.yaml) "
    "to enable AI chat. Local responses are used until then."
)


async def _json_body(request: Request) -> dict[str, Any]:
    if not request.headers.get("content-type", "").startswith("application/json"):
        return {}
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _rate_limited(limiter: RateLimiter) -> JSONResponse | None:
    try:
        limiter.acquire()
    except RateLimitExceeded as exc:
        logger.warning("Rate limit hit: %s", exc.status)
        info = parse_error(exc)
        return JSONResponse(
            {**info.to_dict(), "retry_after": round(exc.retry_after, 1)},
            status_code=429,
        )
    return None


def _log_conversation(state: ConsoleState, message: str, response: str, intent: str) -> dict[str, Any]:
    sentiment = score_sentiment(message)
    state.storage.create_conversation({
        "message": message,
        "response": response,
        "sentiment": sentiment.mood,
        "sentiment_score": sentiment.score,
        "intent": intent,
    })
    return sentiment.to_dict()


# ------------------------------------------------------------------
# AI chat (LLM pass-through with local fallback)
# ------------------------------------------------------------------

@router.post("/ai/chat")
async def ai_chat(request: Request) -> JSONResponse:
    """Single-turn chat.

    Request body::

        {"message": "What's on my plate today?"}

    When no provider is configured the body carries ``api_available: false``
    and a ``fallback`` reply composed locally.
    """
    state = get_state()
    body = await _json_body(request)
    check = validate_message(body.get("message"), state.config["message_limit"])
    if not check.valid:
        return JSONResponse({"error": check.error}, status_code=400)

    limited = _rate_limited(state.chat_limiter)
    if limited is not None:
        return limited

    message = body["message"].strip()
    try:
        reply = await asyncio.to_thread(state.chat_backend.send, message)
    except Exception as exc:
        logger.exception("Chat backend error")
        info = parse_error(exc)
        fallback = await state.composer.local_reply(message)
        return JSONResponse({**info.to_dict(), "fallback": fallback}, status_code=500)

    if not reply.api_available:
        fallback = await state.composer.local_reply(message)
        _log_conversation(state, message, fallback, "local")
        return JSONResponse({
            "response": "",
            "error": "AI chat not configured",
            "api_available": False,
            "message": NOT_CONFIGURED_MESSAGE,
            "alternatives": list(AI_ALTERNATIVES.values()),
            "fallback": fallback,
        })

    sentiment = _log_conversation(state, message, reply.response, "general")
    return JSONResponse({"response": reply.response, "api_available": True, "sentiment": sentiment})


# ------------------------------------------------------------------
# Voice / typed commands
# ------------------------------------------------------------------

@router.post("/voice/command")
async def voice_command(request: Request) -> JSONResponse:
    """Classify and answer one command.

    Request body is either ``{"transcript": "Computer show me weather"}``
    (wake word required, otherwise ignored) or ``{"command": "show me weather"}``.
    """
    state = get_state()
    body = await _json_body(request)

    if "transcript" in body:
        command = strip_wake_word(str(body.get("transcript") or ""))
        if command is None:
            return JSONResponse({"ignored": True})
    else:
        command = body.get("command")

    check = validate_message(command, state.config["message_limit"])
    if not check.valid:
        return JSONResponse({"error": check.error}, status_code=400)

    limited = _rate_limited(state.voice_limiter)
    if limited is not None:
        return limited

    intent = classify(command.strip())
    reply = await state.composer.compose(intent)
    sentiment = _log_conversation(state, intent.utterance, reply, intent.kind)
    state.storage.record_command()

    payload: dict[str, Any] = {
        "intent": intent.to_dict(),
        "reply": reply,
        "navigate": intent.target,
        "sentiment": sentiment,
    }
    if intent.kind == MULTI_VIEW:
        payload["layout"] = dispatch_panels(intent.tags).to_dict()
    return JSONResponse(payload)


@router.post("/nlp/classify")
async def nlp_classify(request: Request) -> JSONResponse:
    body = await _json_body(request)
    text = body.get("text")
    if not isinstance(text, str) or not text.strip():
        return JSONResponse({"error": "text is required"}, status_code=400)
    return JSONResponse(classify(text).to_dict())


@router.post("/nlp/sentiment")
async def nlp_sentiment(request: Request) -> JSONResponse:
    body = await _json_body(request)
    text = body.get("text", "")
    if not isinstance(text, str):
        return JSONResponse({"error": "text must be a string"}, status_code=400)
    return JSONResponse(score_sentiment(text).to_dict())


# ------------------------------------------------------------------
# Multi-view
# ------------------------------------------------------------------

@router.get("/multiview")
async def multiview(panels: str = "") -> JSONResponse:
    layout = dispatch_panels(parse_panels_param(panels))
    return JSONResponse(layout.to_dict(), status_code=200 if layout.ok else 422)


# ------------------------------------------------------------------
# Terminal
# ------------------------------------------------------------------

@router.post("/terminal/command")
async def terminal_command(request: Request) -> JSONResponse:
    state = get_state()
    body = await _json_body(request)
    command = body.get("command")
    if not isinstance(command, str) or not command.strip():
        return JSONResponse({"error": "command is required"}, status_code=400)

    result = state.terminal.run(command)
    state.storage.record_command()
    return JSONResponse(result.to_dict())


@router.get("/terminal/staged")
async def terminal_staged() -> JSONResponse:
    """Run (once) the command staged by a voice easter egg, if any."""
    state = get_state()
    command = state.stash.consume()
    if not command:
        return JSONResponse({"command": None, "clear": False, "lines": []})
    return JSONResponse({"command": command, **state.terminal.run(command).to_dict()})
