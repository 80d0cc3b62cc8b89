"""
Tests for the multi-provider LLM client.

Tests cover:
- Provider selection from configured keys
- Primary / fallback behaviour of LLMClient.generate
- Gemini request config (JSON mode, Google Search grounding)
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from stockwatch.services.llm.client import (
    CLIENT_CLASSES,
    BaseLLMClient,
    GeminiClient,
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    ModelTier,
)


def stub_class(provider: LLMProvider, fail: bool = False):
    """A BaseLLMClient that answers '<provider> answer' or raises."""

    class StubClient(BaseLLMClient):
        calls = []

        def __init__(self, config):
            self.config = config

        async def generate(self, system_prompt, user_prompt, model_tier, **kwargs):
            type(self).calls.append(user_prompt)
            if fail:
                raise ConnectionError(f"{provider.value} down")
            return LLMResponse(
                content=f"{provider.value} answer",
                model="stub",
                provider=provider,
                usage={},
            )

        async def health_check(self):
            return not fail

    StubClient.provider = provider
    return StubClient


@pytest.fixture
def stubs():
    """Healthy stubs for every provider."""
    classes = {provider: stub_class(provider) for provider in LLMProvider}
    with patch.dict(CLIENT_CLASSES, classes):
        yield classes


def generate(client: LLMClient) -> LLMResponse:
    return asyncio.run(
        client.generate(
            system_prompt="system",
            user_prompt="question",
            model_tier=ModelTier.EXPLANATION,
        )
    )


# =============================================================================
# Provider setup
# =============================================================================

class TestSetup:
    """Tests for LLMClient._setup_clients."""

    def test_no_keys(self, stubs):
        client = LLMClient(LLMConfig(provider=LLMProvider.GEMINI))

        assert client.is_configured is False
        assert client.get_active_provider() is None

    def test_fallback_follows_preference_order(self, stubs):
        client = LLMClient(LLMConfig(
            provider=LLMProvider.ANTHROPIC,
            gemini_api_key="g",
            anthropic_api_key="a",
            openai_api_key="o",
        ))

        assert client._primary.provider == LLMProvider.ANTHROPIC
        assert client._fallback.provider == LLMProvider.GEMINI

    def test_fallback_skips_missing_keys(self, stubs):
        client = LLMClient(LLMConfig(
            provider=LLMProvider.GEMINI,
            gemini_api_key="g",
            openai_api_key="o",
        ))

        assert client._fallback.provider == LLMProvider.OPENAI

    def test_primary_without_key(self, stubs):
        client = LLMClient(LLMConfig(provider=LLMProvider.GEMINI, openai_api_key="o"))

        assert client._primary is None
        assert client.is_configured is True
        assert client.get_active_provider() == LLMProvider.OPENAI


# =============================================================================
# Generate with fallback
# =============================================================================

class TestGenerate:
    """Tests for LLMClient.generate."""

    def test_no_providers_configured(self, stubs):
        client = LLMClient(LLMConfig(provider=LLMProvider.GEMINI))

        with pytest.raises(RuntimeError, match="No LLM providers configured"):
            generate(client)

    def test_primary_answers(self, stubs):
        client = LLMClient(LLMConfig(
            provider=LLMProvider.GEMINI,
            gemini_api_key="g",
            anthropic_api_key="a",
        ))

        response = generate(client)

        assert response.content == "gemini answer"
        assert stubs[LLMProvider.ANTHROPIC].calls == []

    def test_falls_back_when_primary_raises(self):
        classes = {
            LLMProvider.GEMINI: stub_class(LLMProvider.GEMINI, fail=True),
            LLMProvider.ANTHROPIC: stub_class(LLMProvider.ANTHROPIC),
            LLMProvider.OPENAI: stub_class(LLMProvider.OPENAI),
        }
        with patch.dict(CLIENT_CLASSES, classes):
            client = LLMClient(LLMConfig(
                provider=LLMProvider.GEMINI,
                gemini_api_key="g",
                anthropic_api_key="a",
            ))
            response = generate(client)

        assert response.content == "anthropic answer"
        assert response.provider == LLMProvider.ANTHROPIC
        assert classes[LLMProvider.GEMINI].calls == ["question"]

    def test_reraises_without_fallback(self):
        classes = {LLMProvider.GEMINI: stub_class(LLMProvider.GEMINI, fail=True)}
        with patch.dict(CLIENT_CLASSES, classes):
            client = LLMClient(LLMConfig(provider=LLMProvider.GEMINI, gemini_api_key="g"))

            with pytest.raises(ConnectionError):
                generate(client)

    def test_fallback_only(self, stubs):
        client = LLMClient(LLMConfig(provider=LLMProvider.GEMINI, openai_api_key="o"))
        assert generate(client).content == "openai answer"

    def test_health_uses_fallback(self):
        classes = {
            LLMProvider.GEMINI: stub_class(LLMProvider.GEMINI, fail=True),
            LLMProvider.ANTHROPIC: stub_class(LLMProvider.ANTHROPIC),
        }
        with patch.dict(CLIENT_CLASSES, classes):
            client = LLMClient(LLMConfig(
                provider=LLMProvider.GEMINI,
                gemini_api_key="g",
                anthropic_api_key="a",
            ))
            assert asyncio.run(client.health_check()) is True


# =============================================================================
# Gemini request config
# =============================================================================

class TestGeminiClient:
    """Tests for GeminiClient without network access."""

    @pytest.fixture
    def gemini(self):
        return GeminiClient(LLMConfig(provider=LLMProvider.GEMINI, gemini_api_key="g"))

    def test_search_uses_google_search_tool(self, gemini):
        config = gemini._build_config("system", None, None, "json", use_search=True)

        assert len(config.tools) == 1
        assert config.tools[0].google_search is not None
        assert config.tools[0].google_search_retrieval is None
        # JSON mode is not combined with grounding
        assert config.response_mime_type is None

    def test_json_mode_without_search(self, gemini):
        config = gemini._build_config("system", 0.0, 256, "json", use_search=False)

        assert config.response_mime_type == "application/json"
        assert config.tools is None
        assert config.temperature == 0.0
        assert config.max_output_tokens == 256
        assert config.system_instruction == "system"

    def test_defaults_from_config(self, gemini):
        config = gemini._build_config("", None, None, None, use_search=False)

        assert config.temperature == 0.3
        assert config.max_output_tokens == 4096
        assert config.system_instruction is None

    def test_generate_collects_grounding_urls(self, gemini):
        response = SimpleNamespace(
            text="PRICE: 142.50\nNEWS: Chips rally.",
            usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=8),
            candidates=[
                SimpleNamespace(
                    grounding_metadata=SimpleNamespace(
                        grounding_chunks=[
                            SimpleNamespace(web=SimpleNamespace(uri="https://news/1")),
                            SimpleNamespace(web=None),
                        ]
                    )
                )
            ],
        )
        sdk_client = MagicMock()
        sdk_client.models.generate_content.return_value = response

        with patch.object(gemini, "_get_client", return_value=sdk_client):
            result = asyncio.run(
                gemini.generate(
                    system_prompt="system",
                    user_prompt="NVDA price",
                    model_tier=ModelTier.REASONING,
                    use_search=True,
                )
            )

        assert result.content.startswith("PRICE: 142.50")
        assert result.source_urls == ["https://news/1"]
        assert result.usage == {"prompt_tokens": 12, "completion_tokens": 8}

        kwargs = sdk_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "NVDA price"
        assert kwargs["config"].tools[0].google_search is not None
