"""
Knowledge Base Composition

Builds the text placed into the system prompt: the built-in document
followed by any knowledge items the user added during the session.
Added items are numbered from 1000 so they never collide with the
built-in numbering.
"""

from collections.abc import Sequence

from yammii_assist.knowledge.assets import KNOWLEDGE_BASE_PLACEHOLDER
from yammii_assist.types.knowledge import KnowledgeItem

ADDED_KNOWLEDGE_HEADER = "\n\n**补充知识库 (Added Knowledge):**\n"
ADDED_KNOWLEDGE_START = 1000


def render_knowledge_item(index: int, item: KnowledgeItem) -> str:
    """Render one added item, e.g. '1000. **Q**\\n   * A\\n'."""
    return f"{ADDED_KNOWLEDGE_START + index}. **{item.question}**\n   * {item.answer}\n"


def compose_knowledge_base(
    base_document: str,
    extra_knowledge: Sequence[KnowledgeItem],
) -> str:
    """
    Merge the base document with added knowledge items.

    The added section is only present when there is at least one item.
    Items keep their input order.
    """
    if not extra_knowledge:
        return base_document

    rendered = "".join(
        render_knowledge_item(i, item) for i, item in enumerate(extra_knowledge)
    )
    return base_document + ADDED_KNOWLEDGE_HEADER + rendered


def build_system_instruction(template: str, knowledge_base: str) -> str:
    """Substitute the composed knowledge base into the prompt template."""
    return template.replace(KNOWLEDGE_BASE_PLACEHOLDER, knowledge_base, 1)
