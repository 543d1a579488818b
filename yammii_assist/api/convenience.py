"""
Convenience Functions

Top-level functions for common operations without wiring up providers and
assets by hand. These are designed for quick scripts and REPL usage; a
long-running caller should build one provider and reuse it.

Example:
    >>> from yammii_assist import converse, extract
    >>> reply = await converse([ConversationTurn.from_user("如何退款？")])
    >>> items = await extract(file_base64, "application/pdf")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from yammii_assist.assistant.prompts import PROVIDER_ERROR_FALLBACK

if TYPE_CHECKING:
    from yammii_assist.api.session import SupportSession
    from yammii_assist.config.settings import AssistConfig
    from yammii_assist.types.conversation import ConversationTurn
    from yammii_assist.types.knowledge import KnowledgeItem

logger = logging.getLogger(__name__)


def create_session(config: "AssistConfig | None" = None) -> "SupportSession":
    """Create a SupportSession from configuration (environment by default)."""
    from yammii_assist.api.session import SupportSession
    return SupportSession(config)


async def converse(
    history: Sequence["ConversationTurn"],
    extra_knowledge: Sequence["KnowledgeItem"] = (),
    *,
    config: "AssistConfig | None" = None,
) -> str:
    """
    Answer the last turn of `history`. Never raises; see PromptComposer.converse.

    Configuration and asset errors (bad environment values, a missing
    knowledge base file) are logged and answered with the busy fallback.
    """
    from yammii_assist.assistant.composer import PromptComposer
    from yammii_assist.config import AssistConfig
    from yammii_assist.knowledge.assets import load_assets
    from yammii_assist.providers import create_llm_provider

    try:
        config = config or AssistConfig()
        composer = PromptComposer(
            create_llm_provider(config),
            load_assets(config),
            temperature=config.chat_temperature,
        )
    except Exception:
        logger.exception("Could not set up the assistant for converse")
        return PROVIDER_ERROR_FALLBACK
    return await composer.converse(history, extra_knowledge)


async def extract(
    file_base64: str,
    mime_type: str,
    *,
    config: "AssistConfig | None" = None,
) -> list["KnowledgeItem"]:
    """
    Extract knowledge items from a document.

    Raises:
        ExtractionFailed: If extraction fails
    """
    from yammii_assist.assistant.extractor import DocumentExtractor
    from yammii_assist.config import AssistConfig
    from yammii_assist.providers import create_llm_provider

    config = config or AssistConfig()
    extractor = DocumentExtractor(
        create_llm_provider(config),
        temperature=config.extraction_temperature,
    )
    return await extractor.extract(file_base64, mime_type)
