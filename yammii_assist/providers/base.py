"""
Abstract Provider Interface

Base class for LLM providers. A provider is created once by the caller and
handed to the components that need it.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from yammii_assist.types.conversation import ConversationTurn
from yammii_assist.types.requests import RequestConfig


class LLMProvider(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    async def send_chat(
        self,
        history: Sequence[ConversationTurn],
        message: str,
        *,
        config: RequestConfig,
    ) -> str | None:
        """
        Open a new chat session seeded with `history` and send `message`.

        Returns the reply text, or None if the model produced no text.
        """
        ...

    @abstractmethod
    async def generate_with_file(
        self,
        prompt: str,
        *,
        data: str,
        mime_type: str,
        config: RequestConfig,
    ) -> str | None:
        """
        Single-turn request combining an instruction with an inline file.

        Args:
            prompt: Instruction text
            data: Base64-encoded file content
            mime_type: Media type of the file
            config: Generation settings, optionally with a response schema

        Returns the generated text, or None if the model produced no text.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Current model name."""
        ...
