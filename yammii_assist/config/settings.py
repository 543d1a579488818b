"""
AssistConfig - Configuration Management

Sensible defaults with full override capability.

Example:
    >>> # Use defaults (reads from environment)
    >>> config = AssistConfig()

    >>> # Explicit configuration
    >>> config = AssistConfig(llm_model="gemini-2.5-pro", chat_temperature=0.0)

    >>> # From config file
    >>> config = AssistConfig.from_file("./yammii.toml")

Environment Variables:
    GOOGLE_API_KEY - Google API key (GEMINI_API_KEY is accepted as well)
    YAMMII_LLM_MODEL - Gemini model used for chat and extraction
    YAMMII_CHAT_TEMPERATURE - Sampling temperature for chat replies
    YAMMII_EXTRACTION_TEMPERATURE - Sampling temperature for document extraction
    YAMMII_KNOWLEDGE_BASE_PATH - Replacement base knowledge document
    YAMMII_PROMPT_TEMPLATE_PATH - Replacement system prompt template
    YAMMII_COST_DEBUG_WARN_THRESHOLD_USD - Warn when a session's total estimated cost reaches this
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

_TOML_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _toml_string(value: str) -> str:
    """Quote a value as a single-line TOML basic string."""
    out = []
    for ch in value:
        if ch in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


class AssistConfig:
    """Configuration for the Yammii support assistant."""

    # === LLM Configuration ===

    llm_provider: str = "google"
    """LLM provider. Only "google" (Gemini) is supported."""

    llm_model: str = "gemini-2.5-flash"
    """Model for chat replies and document extraction"""

    chat_temperature: float = 0.2
    """Low temperature keeps answers close to the knowledge base"""

    extraction_temperature: float = 0.1
    """Favors literal extraction over paraphrase"""

    # === API Keys ===

    google_api_key: str | None = None

    # === Knowledge Assets ===

    knowledge_base_path: str | None = None
    """Base knowledge document. None uses the packaged document."""

    prompt_template_path: str | None = None
    """System prompt template containing {{KNOWLEDGE_BASE}}. None uses the packaged template."""

    greeting: str = "你好！我是 Yammii POS 技术助手。关于 POS 系统、刷卡机或后台设置，有什么可以帮您的？"
    """First model turn of a new chat session"""

    # === Cost Telemetry Configuration ===

    cost_debug_warn_threshold_usd: float | None = None
    """Warn once the session's total estimated cost reaches this (USD)"""

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize configuration.

        Args:
            **kwargs: Override any configuration option
        """
        # Load from environment first
        self._load_from_env()

        # Apply explicit overrides
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

        if self.llm_provider != "google":
            raise ValueError(f"Unsupported LLM provider: {self.llm_provider}")

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        self.google_api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")

        if model := os.getenv("YAMMII_LLM_MODEL"):
            self.llm_model = model
        if temperature := os.getenv("YAMMII_CHAT_TEMPERATURE"):
            self.chat_temperature = float(temperature)
        if temperature := os.getenv("YAMMII_EXTRACTION_TEMPERATURE"):
            self.extraction_temperature = float(temperature)
        if path := os.getenv("YAMMII_KNOWLEDGE_BASE_PATH"):
            self.knowledge_base_path = path
        if path := os.getenv("YAMMII_PROMPT_TEMPLATE_PATH"):
            self.prompt_template_path = path
        if threshold := os.getenv("YAMMII_COST_DEBUG_WARN_THRESHOLD_USD"):
            self.cost_debug_warn_threshold_usd = float(threshold)

    @classmethod
    def from_file(cls, path: str | Path) -> "AssistConfig":
        """
        Load configuration from TOML file.

        Nested sections are flattened into config keys.

        Example TOML:
            [llm]
            model = "gemini-2.5-flash"
            chat_temperature = 0.2

            [knowledge]
            base_path = "./kb/pos.md"
            prompt_template_path = "./kb/prompt.md"

            [api_keys]
            google = "..."

        Args:
            path: Path to TOML configuration file

        Returns:
            AssistConfig instance with values from file

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        flat_config: dict[str, Any] = {}

        # Map section names to config key prefixes
        section_mapping = {
            "llm": "llm_",
            "knowledge": "knowledge_",
            "api_keys": "",  # api_keys.google -> google_api_key
            "cost_telemetry": "cost_debug_",
        }
        # Keys that already carry their full name inside a section
        passthrough = {
            "chat_temperature",
            "extraction_temperature",
            "prompt_template_path",
            "greeting",
        }

        for section, prefix in section_mapping.items():
            if section in data:
                for key, value in data[section].items():
                    if section == "api_keys":
                        flat_config[f"{key}_api_key"] = value
                    elif key in passthrough:
                        flat_config[key] = value
                    else:
                        flat_config[f"{prefix}{key}"] = value

        # Also support flat top-level keys
        for key, value in data.items():
            if key not in section_mapping and not isinstance(value, dict):
                flat_config[key] = value

        return cls(**flat_config)

    @classmethod
    def from_env(cls) -> "AssistConfig":
        """Load configuration from environment variables only."""
        return cls()

    def to_file(self, path: str | Path) -> None:
        """
        Save configuration to TOML file.

        API keys are excluded.

        Args:
            path: Path to write TOML configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, str | int | float | bool | None]] = {
            "llm": {
                "provider": self.llm_provider,
                "model": self.llm_model,
                "chat_temperature": self.chat_temperature,
                "extraction_temperature": self.extraction_temperature,
            },
            "knowledge": {
                "base_path": self.knowledge_base_path,
                "prompt_template_path": self.prompt_template_path,
                "greeting": self.greeting,
            },
            "cost_telemetry": {
                "warn_threshold_usd": self.cost_debug_warn_threshold_usd,
            },
        }

        lines = ["# yammii-assist configuration", ""]

        for section_name, section_values in sections.items():
            lines.append(f"[{section_name}]")
            for key, value in section_values.items():
                if isinstance(value, str):
                    lines.append(f"{key} = {_toml_string(value)}")
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, (int, float)):
                    lines.append(f"{key} = {value}")
            lines.append("")

        lines.extend([
            "# API keys should be set via environment variables:",
            "# GOOGLE_API_KEY",
            "",
        ])

        path.write_text("\n".join(lines), encoding="utf-8")

    def with_overrides(self, **kwargs: Any) -> "AssistConfig":
        """Return new config with specified overrides."""
        new_config = AssistConfig.__new__(AssistConfig)
        for key in dir(self):
            if not key.startswith("_") and not callable(getattr(self, key)):
                setattr(new_config, key, getattr(self, key))
        for key, value in kwargs.items():
            if not hasattr(new_config, key):
                raise ValueError(f"Unknown configuration option: {key}")
            setattr(new_config, key, value)
        return new_config
