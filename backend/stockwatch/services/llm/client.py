"""
LLM Client Abstraction

Provides unified interface for Google Gemini, Anthropic Claude and OpenAI.
Handles provider switching, fallback and optional web-search grounding.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import asyncio
import logging

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GEMINI = "gemini"


class ModelTier(str, Enum):
    REASONING = "reasoning"  # Strategy report, signal analysis
    EXPLANATION = "explanation"  # Lookups, news, price, profile


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider: LLMProvider
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    reasoning_model: str = "gemini-2.5-flash"
    explanation_model: str = "gemini-2.5-flash"
    max_tokens: int = 4096
    temperature: float = 0.3


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    provider: LLMProvider
    usage: dict
    source_urls: list[str] = field(default_factory=list)


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    provider: LLMProvider

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_tier: ModelTier,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
        use_search: bool = False,
    ) -> LLMResponse:
        """Generate a response from the LLM."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the LLM service is accessible."""
        pass


class GeminiClient(BaseLLMClient):
    """Google Gemini client implementation."""

    provider = LLMProvider.GEMINI

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client = None

    def _get_client(self):
        """Lazy initialization of the google-genai client."""
        if self._client is None:
            try:
                from google import genai
            except ImportError:
                raise RuntimeError(
                    "google-genai package not installed. Run: pip install google-genai"
                )

            self._client = genai.Client(api_key=self.config.gemini_api_key)
        return self._client

    def _get_model_name(self, tier: ModelTier) -> str:
        if tier == ModelTier.REASONING:
            return self.config.reasoning_model
        return self.config.explanation_model

    def _build_config(
        self,
        system_prompt: Optional[str],
        temperature: Optional[float],
        max_tokens: Optional[int],
        response_format: Optional[str],
        use_search: bool,
    ):
        """GenerateContentConfig for one call."""
        from google.genai import types

        tools = None
        mime_type = None
        # JSON mode and search grounding cannot be combined
        if use_search:
            tools = [types.Tool(google_search=types.GoogleSearch())]
        elif response_format == "json":
            mime_type = "application/json"

        return types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            temperature=temperature if temperature is not None else self.config.temperature,
            max_output_tokens=max_tokens if max_tokens is not None else self.config.max_tokens,
            response_mime_type=mime_type,
            tools=tools,
        )

    @staticmethod
    def _grounding_urls(response) -> list[str]:
        """Web sources from search grounding metadata, if any."""
        try:
            metadata = response.candidates[0].grounding_metadata
        except (AttributeError, IndexError):
            return []

        urls = []
        for chunk in getattr(metadata, "grounding_chunks", None) or []:
            web = getattr(chunk, "web", None)
            uri = getattr(web, "uri", None)
            if uri:
                urls.append(uri)
        return urls

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_tier: ModelTier,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
        use_search: bool = False,
    ) -> LLMResponse:
        """Generate response using Gemini."""
        client = self._get_client()
        model_name = self._get_model_name(model_tier)
        config = self._build_config(
            system_prompt, temperature, max_tokens, response_format, use_search
        )

        try:
            # generate_content is synchronous, wrap in executor
            loop = asyncio.get_event_loop()
            response = await loop.run_in_executor(
                None,
                lambda: client.models.generate_content(
                    model=model_name,
                    contents=user_prompt,
                    config=config,
                ),
            )

            usage = getattr(response, "usage_metadata", None)
            return LLMResponse(
                content=response.text or "",
                model=model_name,
                provider=LLMProvider.GEMINI,
                usage={
                    "prompt_tokens": getattr(usage, "prompt_token_count", 0),
                    "completion_tokens": getattr(usage, "candidates_token_count", 0),
                },
                source_urls=self._grounding_urls(response),
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise

    async def health_check(self) -> bool:
        """Check Gemini API connectivity."""
        try:
            client = self._get_client()
            model_name = self._get_model_name(ModelTier.EXPLANATION)
            loop = asyncio.get_event_loop()
            response = await loop.run_in_executor(
                None,
                lambda: client.models.generate_content(model=model_name, contents="Hi"),
            )
            return response is not None
        except Exception as e:
            logger.error(f"Gemini health check failed: {e}")
            return False


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude client implementation."""

    provider = LLMProvider.ANTHROPIC

    MODEL_MAP = {
        ModelTier.REASONING: "claude-sonnet-4-20250514",
        ModelTier.EXPLANATION: "claude-3-5-haiku-latest",
    }
    WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 3}

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client = None

    def _get_client(self):
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            try:
                import anthropic

                self._client = anthropic.AsyncAnthropic(
                    api_key=self.config.anthropic_api_key
                )
            except ImportError:
                raise RuntimeError(
                    "anthropic package not installed. Run: pip install anthropic"
                )
        return self._client

    def _get_model(self, tier: ModelTier) -> str:
        return self.MODEL_MAP.get(tier, self.MODEL_MAP[ModelTier.EXPLANATION])

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_tier: ModelTier,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
        use_search: bool = False,
    ) -> LLMResponse:
        """Generate response using Claude."""
        client = self._get_client()
        model = self._get_model(model_tier)

        temp = temperature if temperature is not None else self.config.temperature
        tokens = max_tokens if max_tokens is not None else self.config.max_tokens

        kwargs = {
            "model": model,
            "max_tokens": tokens,
            "temperature": temp,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if use_search:
            kwargs["tools"] = [self.WEB_SEARCH_TOOL]

        try:
            response = await client.messages.create(**kwargs)

            # Search responses interleave tool blocks with text blocks
            text_parts = []
            urls = []
            for block in response.content:
                block_type = getattr(block, "type", None)
                if block_type == "text":
                    text_parts.append(block.text)
                elif block_type == "web_search_tool_result":
                    for result in getattr(block, "content", None) or []:
                        url = getattr(result, "url", None)
                        if url:
                            urls.append(url)

            return LLMResponse(
                content="".join(text_parts),
                model=model,
                provider=LLMProvider.ANTHROPIC,
                usage={
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
                source_urls=urls,
            )
        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise

    async def health_check(self) -> bool:
        """Check Anthropic API connectivity."""
        try:
            client = self._get_client()
            response = await client.messages.create(
                model=self.MODEL_MAP[ModelTier.EXPLANATION],
                max_tokens=10,
                messages=[{"role": "user", "content": "Hi"}],
            )
            return response is not None
        except Exception as e:
            logger.error(f"Anthropic health check failed: {e}")
            return False


class OpenAIClient(BaseLLMClient):
    """OpenAI GPT client implementation. Web search is not used."""

    provider = LLMProvider.OPENAI

    MODEL_MAP = {
        ModelTier.REASONING: "gpt-4o",
        ModelTier.EXPLANATION: "gpt-4o-mini",
    }

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client = None

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            try:
                import openai

                self._client = openai.AsyncOpenAI(api_key=self.config.openai_api_key)
            except ImportError:
                raise RuntimeError(
                    "openai package not installed. Run: pip install openai"
                )
        return self._client

    def _get_model(self, tier: ModelTier) -> str:
        return self.MODEL_MAP.get(tier, "gpt-4o-mini")

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_tier: ModelTier,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
        use_search: bool = False,
    ) -> LLMResponse:
        """Generate response using GPT."""
        client = self._get_client()
        model = self._get_model(model_tier)

        temp = temperature if temperature is not None else self.config.temperature
        tokens = max_tokens if max_tokens is not None else self.config.max_tokens

        if use_search:
            logger.debug("OpenAI client has no search grounding, answering from model knowledge")

        kwargs = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temp,
            "max_tokens": tokens,
        }

        if response_format == "json":
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)

            return LLMResponse(
                content=response.choices[0].message.content or "",
                model=model,
                provider=LLMProvider.OPENAI,
                usage={
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens,
                },
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

    async def health_check(self) -> bool:
        """Check OpenAI API connectivity."""
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=self.MODEL_MAP[ModelTier.EXPLANATION],
                max_tokens=10,
                messages=[{"role": "user", "content": "Hi"}],
            )
            return response is not None
        except Exception as e:
            logger.error(f"OpenAI health check failed: {e}")
            return False


CLIENT_CLASSES = {
    LLMProvider.GEMINI: GeminiClient,
    LLMProvider.ANTHROPIC: AnthropicClient,
    LLMProvider.OPENAI: OpenAIClient,
}

# Fallback preference after the primary provider
FALLBACK_ORDER = [LLMProvider.GEMINI, LLMProvider.ANTHROPIC, LLMProvider.OPENAI]


class LLMClient:
    """
    Unified LLM client with provider switching and fallback.

    Primary provider is tried first.
    Falls back to secondary provider on failure.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._primary: Optional[BaseLLMClient] = None
        self._fallback: Optional[BaseLLMClient] = None
        self._setup_clients()

    def _api_key(self, provider: LLMProvider) -> Optional[str]:
        return {
            LLMProvider.GEMINI: self.config.gemini_api_key,
            LLMProvider.ANTHROPIC: self.config.anthropic_api_key,
            LLMProvider.OPENAI: self.config.openai_api_key,
        }[provider]

    def _setup_clients(self):
        """Setup primary and fallback clients based on configured keys."""
        if self._api_key(self.config.provider):
            self._primary = CLIENT_CLASSES[self.config.provider](self.config)

        for provider in FALLBACK_ORDER:
            if provider != self.config.provider and self._api_key(provider):
                self._fallback = CLIENT_CLASSES[provider](self.config)
                break

        if self._primary is None and self._fallback is None:
            logger.warning("No LLM API keys configured. AI features disabled.")

    @property
    def is_configured(self) -> bool:
        return self._primary is not None or self._fallback is not None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_tier: ModelTier,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
        use_search: bool = False,
    ) -> LLMResponse:
        """
        Generate LLM response with automatic fallback.

        Tries primary provider first, falls back to secondary on failure.
        """
        if not self.is_configured:
            raise RuntimeError("No LLM providers configured")

        kwargs = dict(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model_tier=model_tier,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format=response_format,
            use_search=use_search,
        )

        if self._primary:
            try:
                return await self._primary.generate(**kwargs)
            except Exception as e:
                logger.warning(f"Primary LLM failed: {e}, trying fallback...")
                if self._fallback is None:
                    raise

        return await self._fallback.generate(**kwargs)

    async def health_check(self) -> bool:
        """Check if any LLM provider is accessible."""
        if self._primary:
            if await self._primary.health_check():
                return True
        if self._fallback:
            if await self._fallback.health_check():
                return True
        return False

    def get_active_provider(self) -> Optional[LLMProvider]:
        """Get the provider that will be tried first."""
        if self._primary:
            return self._primary.provider
        if self._fallback:
            return self._fallback.provider
        return None


# Singleton instance management
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        from stockwatch.core.config import settings

        config = LLMConfig(
            provider=LLMProvider(settings.llm_primary_provider),
            anthropic_api_key=settings.anthropic_api_key,
            openai_api_key=settings.openai_api_key,
            gemini_api_key=settings.gemini_api_key,
            reasoning_model=settings.llm_reasoning_model,
            explanation_model=settings.llm_explanation_model,
            temperature=settings.llm_temperature,
        )
        _llm_client = LLMClient(config)
    return _llm_client
