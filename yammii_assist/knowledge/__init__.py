"""
Knowledge Base

Static knowledge assets and the composition of the prompt knowledge base.

Modules:
    assets: Packaged base document and system prompt template
    compose: Merge base document + added items, fill the prompt template
    data/: The packaged text files
"""

from yammii_assist.knowledge.assets import (
    KNOWLEDGE_BASE_PLACEHOLDER,
    KnowledgeAssets,
    count_base_entries,
    load_assets,
)
from yammii_assist.knowledge.compose import (
    ADDED_KNOWLEDGE_HEADER,
    ADDED_KNOWLEDGE_START,
    build_system_instruction,
    compose_knowledge_base,
    render_knowledge_item,
)

__all__ = [
    "KNOWLEDGE_BASE_PLACEHOLDER",
    "KnowledgeAssets",
    "count_base_entries",
    "load_assets",
    "ADDED_KNOWLEDGE_HEADER",
    "ADDED_KNOWLEDGE_START",
    "build_system_instruction",
    "compose_knowledge_base",
    "render_knowledge_item",
]
