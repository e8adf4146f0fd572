from __future__ import annotations

from unittest.mock import patch

import pytest

from lcars.agents.llm_provider import ChatBackend, _resolve_model, is_configured
from tests.conftest import make_mock_litellm_response


@pytest.fixture()
def anthropic_key(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")


class TestResolveModel:
    def test_default_per_provider(self) -> None:
        assert _resolve_model({"provider": "openai"}) == "gpt-4o-mini"

    @pytest.mark.parametrize(
        ("provider", "model", "expected"),
        [
            ("ollama", "llama3", "ollama/llama3"),
            ("azure", "gpt-4o", "azure/gpt-4o"),
            ("google", "gemini-2.5-pro", "gemini/gemini-2.5-pro"),
            ("anthropic", "claude-3-5-sonnet-20241022", "claude-3-5-sonnet-20241022"),
        ],
    )
    def test_prefixes(self, provider: str, model: str, expected: str) -> None:
        assert _resolve_model({"provider": provider, "model": model}) == expected


class TestIsConfigured:
    def test_missing_key(self, monkeypatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert not is_configured({"provider": "anthropic"})

    def test_placeholder_key(self, monkeypatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "your_anthropic_api_key_here")
        assert not is_configured({"provider": "anthropic"})

    def test_ollama_needs_no_key(self) -> None:
        assert is_configured({"provider": "ollama"})


class TestChatBackend:
    def test_not_configured_skips_network(self, monkeypatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with patch("litellm.completion") as completion:
            reply = ChatBackend({"chat": {"provider": "anthropic"}}).send("hello")
        assert reply.response == ""
        assert reply.api_available is False
        completion.assert_not_called()

    def test_send(self, config, anthropic_key) -> None:
        with patch("litellm.completion", return_value=make_mock_litellm_response("All hands, battle stations.")) as completion:
            reply = ChatBackend(config).send("red alert")

        assert reply.response == "All hands, battle stations."
        assert reply.api_available is True
        kwargs = completion.call_args.kwargs
        assert kwargs["model"] == "claude-3-5-sonnet-20241022"
        assert kwargs["messages"][0]["role"] == "system"
        assert kwargs["messages"][-1] == {"role": "user", "content": "red alert"}
        assert kwargs["max_tokens"] == 1024

    def test_empty_content(self, config, anthropic_key) -> None:
        with patch("litellm.completion", return_value=make_mock_litellm_response(None)):
            assert ChatBackend(config).send("hi").response == "No response generated"

    def test_provider_errors_propagate(self, config, anthropic_key) -> None:
        with patch("litellm.completion", side_effect=RuntimeError("overloaded")):
            with pytest.raises(RuntimeError):
                ChatBackend(config).send("hi")
