"""
SupportSession - Chat Session Entry Point

Holds the state a support chat needs between messages: the transcript and
the knowledge items added during the session. The pipeline components are
stateless; the session passes its full state to them on every call.

Nothing is persisted. Added knowledge lives only as long as the session.

Example:
    >>> session = SupportSession()
    >>> reply = await session.ask("刷卡机掉线怎么办？")
    >>> session.add_manual_knowledge("如何重启刷卡机？", "长按电源键 5 秒。")
    >>> outcome = await session.import_document("faq.pdf")
    >>> print(outcome.added, outcome.message)

    # Or with sync API
    >>> reply = session.ask_sync("如何退款？")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from yammii_assist.errors import ExtractionFailed
from yammii_assist.types.conversation import ConversationTurn
from yammii_assist.types.knowledge import ExtractionRequest, KnowledgeItem
from yammii_assist.types.results import CostDebugReport, ImportOutcome
from yammii_assist.utils.cost_telemetry import CostCollector, telemetry_collector

if TYPE_CHECKING:
    from yammii_assist.assistant.composer import PromptComposer
    from yammii_assist.assistant.extractor import DocumentExtractor
    from yammii_assist.config.settings import AssistConfig
    from yammii_assist.knowledge.assets import KnowledgeAssets
    from yammii_assist.providers.base import LLMProvider

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "未能从文档中提取到有效信息。"
IMPORT_FAILED_MESSAGE = "AI 解析失败，请检查文件格式或内容。"


class SupportSession:
    """
    One user's chat with the support assistant.

    Args:
        config: Optional configuration. Uses defaults if not provided.
        llm: Provider to use. Built from config if not provided.
        assets: Knowledge assets. Loaded from config if not provided.
    """

    def __init__(
        self,
        config: "AssistConfig | None" = None,
        *,
        llm: "LLMProvider | None" = None,
        assets: "KnowledgeAssets | None" = None,
    ) -> None:
        # Lazy import to avoid circular imports
        if config is None:
            from yammii_assist.config import AssistConfig
            config = AssistConfig()
        self._config = config

        if llm is None:
            from yammii_assist.providers import create_llm_provider
            llm = create_llm_provider(config)
        if assets is None:
            from yammii_assist.knowledge.assets import load_assets
            assets = load_assets(config)

        from yammii_assist.assistant.composer import PromptComposer
        from yammii_assist.assistant.extractor import DocumentExtractor

        self._llm = llm
        self._assets = assets
        self._composer: PromptComposer = PromptComposer(
            llm, assets, temperature=config.chat_temperature
        )
        self._extractor: DocumentExtractor = DocumentExtractor(
            llm, temperature=config.extraction_temperature
        )

        self._messages: list[ConversationTurn] = []
        self._extra_knowledge: list[KnowledgeItem] = []
        self._costs = CostCollector(warn_threshold_usd=config.cost_debug_warn_threshold_usd)
        self.reset()

    # === Properties ===

    @property
    def config(self) -> "AssistConfig":
        return self._config

    @property
    def llm(self) -> "LLMProvider":
        return self._llm

    @property
    def assets(self) -> "KnowledgeAssets":
        return self._assets

    @property
    def messages(self) -> list[ConversationTurn]:
        """Transcript so far (a copy)."""
        return list(self._messages)

    @property
    def extra_knowledge(self) -> list[KnowledgeItem]:
        """Knowledge added during this session (a copy)."""
        return list(self._extra_knowledge)

    def stats(self) -> dict[str, int]:
        """Knowledge base size: built-in entries and session additions."""
        return {
            "base_entries": self._assets.base_entry_count,
            "added_entries": len(self._extra_knowledge),
            "messages": len(self._messages),
        }

    def cost_report(self) -> CostDebugReport:
        """Token usage and estimated cost of the model calls made so far."""
        return self._costs.summary()

    def reset(self) -> None:
        """Start over with only the greeting and no added knowledge."""
        self._messages = []
        if self._config.greeting:
            self._messages.append(ConversationTurn.from_model(self._config.greeting))
        self._extra_knowledge = []

    # === Chat ===

    async def ask(self, text: str) -> str | None:
        """
        Send a user message and record the reply.

        Blank input is ignored and returns None without calling the model.
        The returned reply is always displayable text.
        """
        text = text.strip()
        if not text:
            return None

        self._messages.append(ConversationTurn.from_user(text))
        with telemetry_collector(self._costs):
            reply = await self._composer.converse(self._messages, self._extra_knowledge)
        self._messages.append(ConversationTurn.from_model(reply))
        return reply

    def ask_sync(self, text: str) -> str | None:
        """Send a message (sync wrapper)."""
        return asyncio.run(self.ask(text))

    # === Knowledge ===

    def add_knowledge(self, items: Iterable[KnowledgeItem]) -> int:
        """Append items to the session knowledge. Returns the number added."""
        items = list(items)
        self._extra_knowledge.extend(items)
        logger.debug(f"Added {len(items)} knowledge items ({len(self._extra_knowledge)} total)")
        return len(items)

    def add_manual_knowledge(self, question: str, answer: str) -> KnowledgeItem:
        """
        Add one hand-written question/answer pair.

        Raises:
            ValueError: If the question or the answer is blank
        """
        if not question.strip() or not answer.strip():
            raise ValueError("Both question and answer are required")
        item = KnowledgeItem(question=question, answer=answer)
        self.add_knowledge([item])
        return item

    async def import_document(
        self,
        source: str | Path | ExtractionRequest,
        mime_type: str | None = None,
    ) -> ImportOutcome:
        """
        Extract knowledge from a document and add it to the session.

        Args:
            source: File path or a prepared ExtractionRequest
            mime_type: Media type override for file paths

        Returns:
            ImportOutcome. `message` is set when nothing was added, either
            because the document had no usable content or extraction failed.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the media type cannot be determined
        """
        if isinstance(source, ExtractionRequest):
            request = source
        else:
            request = ExtractionRequest.from_path(source, mime_type)

        try:
            with telemetry_collector(self._costs):
                items = await self._extractor.extract_request(request)
        except ExtractionFailed as e:
            logger.warning(f"Document import failed for {request.file_name or request.mime_type}: {e}")
            return ImportOutcome(ok=False, message=IMPORT_FAILED_MESSAGE)

        if not items:
            return ImportOutcome(message=NO_CONTENT_MESSAGE)

        self.add_knowledge(items)
        return ImportOutcome(items=items)

    def import_document_sync(
        self,
        source: str | Path | ExtractionRequest,
        mime_type: str | None = None,
    ) -> ImportOutcome:
        """Import a document (sync wrapper)."""
        return asyncio.run(self.import_document(source, mime_type))
