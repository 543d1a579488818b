"""
Prompt Composer

Answers a chat message from the knowledge base:

1. Compose the knowledge base (built-in document + added items)
2. Fill the system prompt template
3. Split the transcript into prior turns and the new user message
4. Send the message in a fresh chat session seeded with the prior turns

Failures never reach the caller. Any provider error becomes a fixed
"system busy" reply, and an empty model reply becomes a fixed apology,
so the chat always has something to display.

Example:
    >>> composer = PromptComposer(llm, load_assets())
    >>> reply = await composer.converse(
    ...     [ConversationTurn.from_user("刷卡机掉线怎么办？")],
    ...     extra_knowledge=[],
    ... )
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from yammii_assist.assistant.prompts import (
    CHAT_TEMPERATURE,
    EMPTY_REPLY_FALLBACK,
    PROVIDER_ERROR_FALLBACK,
)
from yammii_assist.knowledge.compose import build_system_instruction, compose_knowledge_base
from yammii_assist.types.conversation import ConversationTurn
from yammii_assist.types.knowledge import KnowledgeItem
from yammii_assist.types.requests import RequestConfig
from yammii_assist.utils.cost_telemetry import telemetry_stage

if TYPE_CHECKING:
    from yammii_assist.knowledge.assets import KnowledgeAssets
    from yammii_assist.providers.base import LLMProvider

logger = logging.getLogger(__name__)


class PromptComposer:
    """
    Knowledge-grounded chat replies.

    Stateless between calls: the transcript and the added knowledge are
    passed in every time and never stored or cached.

    Args:
        llm: Provider used for the chat call
        assets: Base knowledge document and prompt template
        temperature: Sampling temperature for replies
    """

    def __init__(
        self,
        llm: "LLMProvider",
        assets: "KnowledgeAssets",
        *,
        temperature: float = CHAT_TEMPERATURE,
    ) -> None:
        self.llm = llm
        self.assets = assets
        self.temperature = temperature

    def system_instruction(self, extra_knowledge: Sequence[KnowledgeItem]) -> str:
        """Build the system instruction for the given added knowledge."""
        knowledge_base = compose_knowledge_base(self.assets.base_document, extra_knowledge)
        return build_system_instruction(self.assets.prompt_template, knowledge_base)

    def request_config(self, extra_knowledge: Sequence[KnowledgeItem]) -> RequestConfig:
        return RequestConfig(
            temperature=self.temperature,
            system_instruction=self.system_instruction(extra_knowledge),
        )

    async def converse(
        self,
        history: Sequence[ConversationTurn],
        extra_knowledge: Sequence[KnowledgeItem],
    ) -> str:
        """
        Reply to the last turn of `history`.

        Args:
            history: Transcript, oldest first. The last turn must be the
                user's new message.
            extra_knowledge: Items added on top of the built-in knowledge base

        Returns:
            The model's reply, or a fixed fallback text. Never raises.
        """
        if not history:
            logger.error("converse called with an empty history")
            return PROVIDER_ERROR_FALLBACK
        if history[-1].role != "user":
            logger.error(f"converse expects the last turn from 'user', got '{history[-1].role}'")
            return PROVIDER_ERROR_FALLBACK

        prior_turns = list(history[:-1])
        message = history[-1].text

        try:
            config = self.request_config(extra_knowledge)
            with telemetry_stage("converse"):
                reply = await self.llm.send_chat(prior_turns, message, config=config)
        except Exception:
            logger.exception("Chat request to the model provider failed")
            return PROVIDER_ERROR_FALLBACK

        if not reply:
            logger.warning("Model returned no text for chat message")
            return EMPTY_REPLY_FALLBACK

        logger.debug(
            f"Chat reply: {len(reply)} chars, {len(prior_turns)} prior turns, "
            f"{len(extra_knowledge)} added knowledge items"
        )
        return reply
