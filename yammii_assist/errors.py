"""
Exceptions raised to callers of the assistant pipeline.

Only the document extractor signals failure to its caller. Chat replies
never raise; see PromptComposer.converse.
"""

EXTRACTION_FAILED_MESSAGE = "解析文档失败，请重试。"


class YammiiAssistError(Exception):
    """Base class for errors raised by yammii_assist."""


class ExtractionFailed(YammiiAssistError):
    """
    Knowledge extraction from a document did not complete.

    Covers provider errors as well as responses that are not a valid
    question/answer array. The message is always the fixed user-facing
    text; the underlying error is available as ``__cause__``.
    """

    def __init__(self, message: str = EXTRACTION_FAILED_MESSAGE) -> None:
        super().__init__(message)
        self.message = message
