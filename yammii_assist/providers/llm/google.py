"""
Google Gemini LLM Provider

Implements LLMProvider using the google-genai SDK's async client.

Supports:
    - Multi-turn chat with a system instruction (send_chat)
    - Inline file analysis with JSON schema-constrained output (generate_with_file)

Models:
    - gemini-2.5-flash: Default for chat and extraction
    - gemini-2.5-pro: Higher quality, slower

Example:
    >>> provider = GoogleLLMProvider(api_key="...")
    >>> config = RequestConfig(temperature=0.2, system_instruction="你是技术支持助手。")
    >>> reply = await provider.send_chat([], "刷卡机掉线怎么办？", config=config)
"""

from __future__ import annotations

import base64
import binascii
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from yammii_assist.config.pricing import estimate_llm_cost_usd
from yammii_assist.providers.base import LLMProvider
from yammii_assist.types.conversation import ConversationTurn
from yammii_assist.types.requests import RequestConfig
from yammii_assist.types.results import CostUsageRecord
from yammii_assist.utils.cost_telemetry import current_stage, record_usage

if TYPE_CHECKING:
    from google import genai
    from google.genai import types as genai_types

DEFAULT_MODEL = "gemini-2.5-flash"


def _as_int(value: Any) -> int | None:
    """Best-effort int coercion."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _extract_token_usage(response: Any) -> tuple[int | None, int | None, int | None]:
    """
    Extract token usage from a Gemini response.

    Returns:
        (input_tokens, output_tokens, total_tokens)
    """
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return None, None, None
    return (
        _as_int(getattr(usage, "prompt_token_count", None)),
        _as_int(getattr(usage, "candidates_token_count", None)),
        _as_int(getattr(usage, "total_token_count", None)),
    )


def _genai() -> tuple[Any, Any]:
    """
    Import the google-genai SDK.

    Raises:
        ImportError: If google-genai package is not installed
    """
    try:
        from google import genai
        from google.genai import types
    except ImportError:
        raise ImportError(
            "Gemini provider requires the 'google-genai' package. "
            "Install with: pip install google-genai"
        )
    return genai, types


class GoogleLLMProvider(LLMProvider):
    """
    Gemini provider implementation.

    One SDK client is created on first use and reused for every call on this
    provider. Chat sessions are not reused: each send_chat call starts a new
    session.

    Args:
        api_key: Google API key. If None, the SDK reads GOOGLE_API_KEY / GEMINI_API_KEY.
        model: Model to use (default: "gemini-2.5-flash")
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
    ) -> None:
        self._api_key = api_key
        self._model = model
        # Lazy initialization - create client on first use
        self._client: genai.Client | None = None

    def _get_client(self) -> "genai.Client":
        """Get or create the google-genai client."""
        if self._client is None:
            genai, _ = _genai()
            kwargs: dict[str, Any] = {}
            if self._api_key:
                kwargs["api_key"] = self._api_key
            self._client = genai.Client(**kwargs)
        return self._client

    @property
    def model_name(self) -> str:
        """Current model name."""
        return self._model

    def _build_config(self, config: RequestConfig) -> "genai_types.GenerateContentConfig":
        _, types = _genai()
        kwargs: dict[str, Any] = {"temperature": config.temperature}
        if config.system_instruction is not None:
            kwargs["system_instruction"] = config.system_instruction
        if config.response_schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = config.response_schema
        return types.GenerateContentConfig(**kwargs)

    async def send_chat(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        *,
        config: RequestConfig,
    ) -> str | None:
        """
        Send `message` in a fresh chat session seeded with `history`.

        Args:
            history: Prior turns, oldest first
            message: The new user message
            config: Temperature and system instruction

        Returns:
            Reply text, or None when the response carries no text
        """
        _, types = _genai()
        start = time.perf_counter_ns()

        contents = [
            types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
            for turn in history
        ]
        chat = self._get_client().aio.chats.create(
            model=self._model,
            config=self._build_config(config),
            history=contents,
        )
        response = await chat.send_message(message)

        self._record(
            response,
            operation="send_chat",
            start=start,
            metadata={
                "temperature": config.temperature,
                "history_turns": len(contents),
            },
        )
        return response.text

    async def generate_with_file(
        self,
        prompt: str,
        *,
        data: str,
        mime_type: str,
        config: RequestConfig,
    ) -> str | None:
        """
        Analyze an inline file in a single request.

        The base64 payload is decoded and sent as an inline blob next to the
        instruction text.

        Raises:
            ValueError: If `data` is not valid base64
        """
        _, types = _genai()
        start = time.perf_counter_ns()

        try:
            raw = base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"File payload is not valid base64: {e}") from e

        contents = types.Content(
            role="user",
            parts=[
                types.Part.from_text(text=prompt),
                types.Part.from_bytes(data=raw, mime_type=mime_type),
            ],
        )
        response = await self._get_client().aio.models.generate_content(
            model=self._model,
            contents=contents,
            config=self._build_config(config),
        )

        self._record(
            response,
            operation="generate_with_file",
            start=start,
            metadata={
                "temperature": config.temperature,
                "mime_type": mime_type,
                "payload_bytes": len(raw),
                "structured": config.response_schema is not None,
            },
        )
        return response.text

    def _record(
        self,
        response: Any,
        *,
        operation: str,
        start: int,
        metadata: dict[str, Any],
    ) -> None:
        """Emit a usage record for the active telemetry collector."""
        input_tokens, output_tokens, total_tokens = _extract_token_usage(response)
        estimated = input_tokens is None or output_tokens is None
        input_tokens = input_tokens or 0
        output_tokens = output_tokens or 0
        if total_tokens is None:
            total_tokens = input_tokens + output_tokens

        estimated_cost, pricing_found = estimate_llm_cost_usd(
            self._model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
        elapsed_ms = (time.perf_counter_ns() - start) // 1_000_000

        record_usage(
            CostUsageRecord(
                provider="google",
                model=self._model,
                operation=operation,
                stage=current_stage(),
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=total_tokens,
                estimated_cost_usd=estimated_cost,
                latency_ms=int(elapsed_ms),
                estimated=estimated,
                metadata={**metadata, "pricing_found": pricing_found},
            )
        )

    def with_model(self, model: str) -> "GoogleLLMProvider":
        """
        Return a new provider instance with a different model.

        Args:
            model: New model name to use

        Returns:
            New GoogleLLMProvider with the specified model
        """
        return GoogleLLMProvider(api_key=self._api_key, model=model)
