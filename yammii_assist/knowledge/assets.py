"""
Knowledge Assets

The fixed text the assistant answers from: a base knowledge document with
numbered entries and a system prompt template with a {{KNOWLEDGE_BASE}}
placeholder. Both ship as package data and are loaded once at startup;
configuration can point either one at a local file instead.

Example:
    >>> assets = load_assets()
    >>> assets.base_entry_count
    20
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yammii_assist.config.settings import AssistConfig

logger = logging.getLogger(__name__)

KNOWLEDGE_BASE_PLACEHOLDER = "{{KNOWLEDGE_BASE}}"

_DATA_PACKAGE = "yammii_assist.knowledge.data"
_BASE_KNOWLEDGE_FILE = "base_knowledge.md"
_SYSTEM_PROMPT_FILE = "system_prompt.md"

_ENTRY_RE = re.compile(r"^\d+\.")


@dataclass(frozen=True)
class KnowledgeAssets:
    """
    Loaded knowledge base document and system prompt template.

    Attributes:
        base_document: Built-in knowledge base text
        prompt_template: System prompt containing KNOWLEDGE_BASE_PLACEHOLDER
        base_source: Where the document came from ("package" or a path)
        template_source: Where the template came from ("package" or a path)
    """

    base_document: str
    prompt_template: str
    base_source: str = "package"
    template_source: str = "package"

    def __post_init__(self) -> None:
        if KNOWLEDGE_BASE_PLACEHOLDER not in self.prompt_template:
            raise ValueError(
                f"System prompt template ({self.template_source}) is missing the "
                f"{KNOWLEDGE_BASE_PLACEHOLDER} placeholder"
            )

    @property
    def base_entry_count(self) -> int:
        return count_base_entries(self.base_document)


def count_base_entries(document: str) -> int:
    """Count numbered entries ("12. ...") in a knowledge base document."""
    return sum(1 for line in document.splitlines() if _ENTRY_RE.match(line.strip()))


def _read_packaged(name: str) -> str:
    return resources.files(_DATA_PACKAGE).joinpath(name).read_text(encoding="utf-8")


def _read_file(path: str | Path) -> str:
    path = Path(path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Knowledge asset not found: {path}")
    return path.read_text(encoding="utf-8")


def load_assets(config: AssistConfig | None = None) -> KnowledgeAssets:
    """
    Load the knowledge base document and prompt template.

    Args:
        config: Optional configuration with replacement file paths.

    Raises:
        FileNotFoundError: If a configured file does not exist
        ValueError: If the template lacks the knowledge base placeholder
    """
    base_path = config.knowledge_base_path if config else None
    template_path = config.prompt_template_path if config else None

    if base_path:
        base_document = _read_file(base_path)
        base_source = str(base_path)
    else:
        base_document = _read_packaged(_BASE_KNOWLEDGE_FILE)
        base_source = "package"

    if template_path:
        prompt_template = _read_file(template_path)
        template_source = str(template_path)
    else:
        prompt_template = _read_packaged(_SYSTEM_PROMPT_FILE)
        template_source = "package"

    assets = KnowledgeAssets(
        base_document=base_document,
        prompt_template=prompt_template,
        base_source=base_source,
        template_source=template_source,
    )
    logger.debug(
        f"Loaded knowledge assets: {assets.base_entry_count} base entries "
        f"from {base_source}, template from {template_source}"
    )
    return assets
