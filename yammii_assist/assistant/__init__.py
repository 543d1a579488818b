"""
Assistant Pipeline

The knowledge-augmented prompt/response pipeline.

Pipeline Components:
    1. PromptComposer: Chat replies grounded in the knowledge base (fail-soft)
    2. DocumentExtractor: Q&A extraction from uploaded documents (fail-loud)

Both take an injected LLMProvider and keep no state between calls.

Example:
    >>> from yammii_assist.assistant import PromptComposer, DocumentExtractor
    >>> composer = PromptComposer(llm, assets)
    >>> reply = await composer.converse(history, extra_knowledge)
"""

from yammii_assist.assistant.composer import PromptComposer
from yammii_assist.assistant.extractor import DocumentExtractor, parse_knowledge_items
from yammii_assist.assistant.prompts import (
    EMPTY_REPLY_FALLBACK,
    EXTRACTION_PROMPT,
    PROVIDER_ERROR_FALLBACK,
    QA_RESPONSE_SCHEMA,
)

__all__ = [
    "PromptComposer",
    "DocumentExtractor",
    "parse_knowledge_items",
    "EMPTY_REPLY_FALLBACK",
    "PROVIDER_ERROR_FALLBACK",
    "EXTRACTION_PROMPT",
    "QA_RESPONSE_SCHEMA",
]
