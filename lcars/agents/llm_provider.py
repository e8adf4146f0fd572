"""Chat backend for the AI console using LiteLLM.

Supports Anthropic (default), OpenAI, Google Gemini, Azure AI Foundry, and
Ollama (local). Provider and model come from the ``chat:`` section of
config.yaml; API keys come from environment variables following LiteLLM
conventions. A missing key is reported as "not configured" rather than an
error so the console can answer locally.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("lcars.agents.llm")

_PROVIDER_MODEL_DEFAULTS: dict[str, str] = {
    "anthropic": "claude-3-5-sonnet-20241022",
    "openai": "gpt-4o-mini",
    "google": "gemini/gemini-2.5-pro",
    "azure": "azure/gpt-4o-mini",
    "ollama": "ollama/llama3",
}

_PROVIDER_KEY_VARS: dict[str, str | None] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "google": "GEMINI_API_KEY",
    "azure": "AZURE_API_KEY",
    "ollama": None,
}

AI_ALTERNATIVES: dict[str, dict[str, Any]] = {
    "anthropic": {"name": "Anthropic Claude", "website": "https://console.anthropic.com/"},
    "openai": {"name": "OpenAI", "website": "https://platform.openai.com/"},
    "google": {"name": "Google Gemini", "website": "https://ai.google.dev/"},
    "ollama": {"name": "Local LLMs (Ollama)", "website": "https://ollama.com/"},
}


@dataclass
class ChatReply:
    response: str
    api_available: bool


def _chat_config(cfg: dict[str, Any] | None) -> dict[str, Any]:
    merged: dict[str, Any] = {
        "provider": "anthropic",
        "model": "",
        "api_base": None,
        "max_tokens": 1024,
        "temperature": 0.3,
        "system_prompt": "",
    }
    for key, value in ((cfg or {}).get("chat") or {}).items():
        if value is not None:
            merged[key] = value
    return merged


def _resolve_model(cfg: dict[str, Any]) -> str:
    """Build the LiteLLM model string from provider + model config."""
    provider = cfg.get("provider", "anthropic")
    model = cfg.get("model", "")

    if not model:
        model = _PROVIDER_MODEL_DEFAULTS.get(provider, _PROVIDER_MODEL_DEFAULTS["anthropic"])

    if provider == "ollama" and not model.startswith("ollama/"):
        model = f"ollama/{model}"
    elif provider == "azure" and not model.startswith("azure/"):
        model = f"azure/{model}"
    elif provider == "google" and not model.startswith("gemini/"):
        model = f"gemini/{model}"

    return model


def is_configured(cfg: dict[str, Any]) -> bool:
    """True when the configured provider has a usable API key (or needs none)."""
    provider = cfg.get("provider", "anthropic")
    key_var = _PROVIDER_KEY_VARS.get(provider, "OPENAI_API_KEY")
    if key_var is None:
        return True
    value = os.environ.get(key_var, "").strip()
    return bool(value) and not (value.startswith("your_") and value.endswith("_here"))


class ChatBackend:
    """Single-turn chat against the configured provider."""

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.cfg = _chat_config(config)

    @property
    def model(self) -> str:
        return _resolve_model(self.cfg)

    @property
    def configured(self) -> bool:
        return is_configured(self.cfg)

    def send(self, message: str) -> ChatReply:
        """Return the model's reply, or ``ChatReply("", False)`` when unconfigured.

        Provider errors propagate; the caller decides whether to fall back.
        """
        if not self.configured:
            logger.info("Chat provider %s not configured", self.cfg["provider"])
            return ChatReply("", False)

        import litellm

        messages: list[dict[str, str]] = []
        if self.cfg.get("system_prompt"):
            messages.append({"role": "system", "content": self.cfg["system_prompt"]})
        messages.append({"role": "user", "content": message})

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": int(self.cfg.get("max_tokens", 1024)),
            "temperature": self.cfg.get("temperature", 0.3),
        }
        if self.cfg.get("api_base"):
            kwargs["api_base"] = self.cfg["api_base"]

        logger.info("LLM call: model=%s, chars=%d", kwargs["model"], len(message))

        litellm.drop_params = True
        response = litellm.completion(**kwargs)
        content = response.choices[0].message.content or "No response generated"

        logger.info("LLM response: %d chars", len(content))
        return ChatReply(content, True)
