"""
Fixed prompts, schemas and user-facing fallback texts for the assistant.
"""

# -----------------------------------------------------------------------------
# Chat
# -----------------------------------------------------------------------------

CHAT_TEMPERATURE = 0.2

EMPTY_REPLY_FALLBACK = "抱歉，我无法生成回答。"
"""Returned when the model answers with no text."""

PROVIDER_ERROR_FALLBACK = "系统繁忙，请稍后再试。"
"""Returned when the provider call fails for any reason."""

# -----------------------------------------------------------------------------
# Document Extraction
# -----------------------------------------------------------------------------

EXTRACTION_TEMPERATURE = 0.1

EXTRACTION_PROMPT = (
    "你是一位技术文档专家。分析这份文档并提取所有有用的技术支持问答对 (Q&A)。"
    "忽略无关信息。务必用中文提取。结果以 JSON 数组形式返回。"
)

QA_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "question": {
                "type": "STRING",
                "description": "The technical question extracted from the text.",
            },
            "answer": {
                "type": "STRING",
                "description": "The answer to the question.",
            },
        },
        "required": ["question", "answer"],
    },
}
