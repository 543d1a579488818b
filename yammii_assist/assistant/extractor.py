"""
Document Extractor

Turns an uploaded document (text, PDF or image) into question/answer
knowledge items with one schema-constrained model call.

An empty result is a normal outcome ("nothing useful found"). Anything
that goes wrong, including output that does not match the schema, raises
ExtractionFailed so the caller can tell the two apart.

Example:
    >>> extractor = DocumentExtractor(llm)
    >>> items = await extractor.extract(file_base64, "application/pdf")
"""

import logging
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from yammii_assist.assistant.prompts import (
    EXTRACTION_PROMPT,
    EXTRACTION_TEMPERATURE,
    QA_RESPONSE_SCHEMA,
)
from yammii_assist.errors import ExtractionFailed
from yammii_assist.types.knowledge import ExtractionRequest, KnowledgeItem
from yammii_assist.types.requests import RequestConfig
from yammii_assist.utils.cost_telemetry import telemetry_stage

if TYPE_CHECKING:
    from yammii_assist.providers.base import LLMProvider

logger = logging.getLogger(__name__)

_KNOWLEDGE_LIST = TypeAdapter(list[KnowledgeItem])


def parse_knowledge_items(text: str) -> list[KnowledgeItem]:
    """
    Parse and validate model output as a list of knowledge items.

    Schema enforcement on the provider side is best-effort, so the JSON is
    checked here: it must be an array of objects with string `question`
    and `answer` fields.

    Raises:
        ValidationError: If the text is not valid JSON or does not match
    """
    return _KNOWLEDGE_LIST.validate_json(text, strict=True)


class DocumentExtractor:
    """
    Extracts knowledge items from documents.

    Args:
        llm: Provider used for the extraction call
        temperature: Sampling temperature (low favors literal extraction)
    """

    def __init__(
        self,
        llm: "LLMProvider",
        *,
        temperature: float = EXTRACTION_TEMPERATURE,
    ) -> None:
        self.llm = llm
        self.temperature = temperature

    def request_config(self) -> RequestConfig:
        return RequestConfig(
            temperature=self.temperature,
            response_schema=QA_RESPONSE_SCHEMA,
        )

    async def extract(self, file_base64: str, mime_type: str) -> list[KnowledgeItem]:
        """
        Extract question/answer pairs from a document.

        Args:
            file_base64: Base64 payload with the data-URL prefix removed
            mime_type: Media type of the document

        Returns:
            Extracted items in model order; empty if none were found

        Raises:
            ExtractionFailed: If the provider call fails or its output is invalid
        """
        try:
            with telemetry_stage("extract"):
                text = await self.llm.generate_with_file(
                    EXTRACTION_PROMPT,
                    data=file_base64,
                    mime_type=mime_type,
                    config=self.request_config(),
                )
        except Exception as e:
            logger.exception(f"Knowledge extraction request failed ({mime_type})")
            raise ExtractionFailed() from e

        if not text:
            logger.info(f"Model returned no text for {mime_type} document")
            return []

        try:
            items = parse_knowledge_items(text)
        except ValidationError as e:
            logger.error(f"Extraction output is not a valid Q&A array: {e}")
            raise ExtractionFailed() from e

        logger.info(f"Extracted {len(items)} knowledge items from {mime_type} document")
        return items

    async def extract_request(self, request: ExtractionRequest) -> list[KnowledgeItem]:
        """Extract from a prepared ExtractionRequest."""
        return await self.extract(request.file_base64, request.mime_type)
