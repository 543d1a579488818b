"""
Request Configuration

Per-call generation parameters handed to an LLM provider.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class RequestConfig(BaseModel):
    """
    Immutable generation settings for one provider call.

    Attributes:
        temperature: Sampling temperature (low values favor literal answers)
        system_instruction: System prompt for the call, if any
        response_schema: JSON schema the output must follow. When set, the
            provider asks for JSON output.
    """

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.0
    system_instruction: str | None = None
    response_schema: dict[str, Any] | None = None
