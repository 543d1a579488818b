"""
LLM Providers

Provider-agnostic interface for model calls.

Modules:
    base: Abstract provider interface
    llm/: Provider implementations

Supported LLM Providers:
    - Google Gemini (gemini-2.5-flash) via google-genai

Design:
    - Providers implement LLMProvider and are injected into the composer
      and extractor, so tests can pass a mock instead
    - Structured output uses the provider's response schema support

Example:
    >>> from yammii_assist.providers import LLMProvider
    >>> from yammii_assist.providers.llm import GoogleLLMProvider
"""

from yammii_assist.providers.base import LLMProvider

__all__ = ["LLMProvider", "create_llm_provider"]


def create_llm_provider(config=None) -> LLMProvider:
    """
    Build the provider selected by configuration.

    Args:
        config: AssistConfig. Defaults to AssistConfig() (environment).
    """
    from yammii_assist.config.settings import AssistConfig

    config = config or AssistConfig()
    if config.llm_provider == "google":
        from yammii_assist.providers.llm.google import GoogleLLMProvider
        return GoogleLLMProvider(api_key=config.google_api_key, model=config.llm_model)
    raise ValueError(f"Unsupported LLM provider: {config.llm_provider}")
