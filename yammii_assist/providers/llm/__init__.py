"""
LLM Provider Implementations

Modules:
    google: Google Gemini provider (gemini-2.5-flash)

Each provider implements the LLMProvider interface with:
    - send_chat(): Chat reply in a fresh session seeded with prior turns
    - generate_with_file(): Single-turn request with an inline file,
      optionally constrained to a JSON response schema

Example:
    >>> from yammii_assist.providers.llm import GoogleLLMProvider
    >>> provider = GoogleLLMProvider(model="gemini-2.5-flash")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yammii_assist.providers.llm.google import GoogleLLMProvider


def __getattr__(name: str):
    """Lazy import of providers to avoid loading the SDK until needed."""
    if name == "GoogleLLMProvider":
        from yammii_assist.providers.llm.google import GoogleLLMProvider
        return GoogleLLMProvider
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["GoogleLLMProvider"]
