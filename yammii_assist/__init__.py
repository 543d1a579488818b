"""
yammii-assist - Knowledge-Grounded POS Support Assistant

Answers Yammii POS technical-support questions from a built-in knowledge
base plus knowledge added during the session, using Google Gemini.

Example:
    >>> from yammii_assist import SupportSession
    >>> session = SupportSession()
    >>> reply = await session.ask("刷卡机掉线怎么办？")
    >>> outcome = await session.import_document("faq.pdf")

Main Classes:
    SupportSession: Chat session holding transcript and added knowledge
    PromptComposer: Knowledge-grounded chat replies (never raises)
    DocumentExtractor: Q&A extraction from documents (raises ExtractionFailed)
    AssistConfig: Configuration management
"""

__version__ = "0.1.0"

# Public API - lazy imports to avoid loading the SDK on import
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "SupportSession":
        from yammii_assist.api.session import SupportSession
        return SupportSession

    if name in ("PromptComposer", "DocumentExtractor"):
        from yammii_assist import assistant
        return getattr(assistant, name)

    if name == "AssistConfig":
        from yammii_assist.config.settings import AssistConfig
        return AssistConfig

    if name in ("ExtractionFailed", "YammiiAssistError"):
        from yammii_assist import errors
        return getattr(errors, name)

    # Convenience functions
    if name in ("converse", "extract", "create_session"):
        from yammii_assist.api import convenience
        return getattr(convenience, name)

    # Types
    if name in ("ConversationTurn", "KnowledgeItem", "ExtractionRequest", "RequestConfig"):
        from yammii_assist import types
        return getattr(types, name)

    raise AttributeError(f"module 'yammii_assist' has no attribute {name!r}")


__all__ = [
    # Main classes
    "SupportSession",
    "PromptComposer",
    "DocumentExtractor",
    "AssistConfig",

    # Errors
    "ExtractionFailed",
    "YammiiAssistError",

    # Convenience functions
    "converse",
    "extract",
    "create_session",

    # Types
    "ConversationTurn",
    "KnowledgeItem",
    "ExtractionRequest",
    "RequestConfig",

    # Version
    "__version__",
]
