"""
Result Types

Session Result Models:
    - ImportOutcome: Outcome of adding knowledge from an uploaded document

Cost Telemetry Models:
    - CostUsageRecord: Token usage and estimated cost of one provider call
    - StageCostBreakdown: Aggregate for one pipeline stage
    - CostBreakdown: Aggregate across a request
    - CostDebugReport: Breakdown plus warnings
"""

from typing import Any

from pydantic import BaseModel, Field

from yammii_assist.types.knowledge import KnowledgeItem

# -----------------------------------------------------------------------------
# Session Result Models
# -----------------------------------------------------------------------------


class ImportOutcome(BaseModel):
    """
    Result of importing knowledge from a document.

    Attributes:
        items: Items added to the session (empty on failure or no content)
        ok: False when extraction itself failed
        message: User-facing message when nothing was added
    """

    items: list[KnowledgeItem] = []
    ok: bool = True
    message: str | None = None

    @property
    def added(self) -> int:
        return len(self.items)


# -----------------------------------------------------------------------------
# Cost Telemetry Models
# -----------------------------------------------------------------------------


class CostUsageRecord(BaseModel):
    """
    Usage for a single provider call.

    `estimated` is True when token counts were missing from the provider
    response and recorded as zero.
    """

    provider: str
    model: str
    operation: str
    stage: str = "unknown"
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    latency_ms: int = 0
    estimated: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)


class StageCostBreakdown(BaseModel):
    """Aggregated usage for one telemetry stage."""

    stage: str
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    total_latency_ms: int = 0


class CostBreakdown(BaseModel):
    """Aggregated usage across all stages of a request."""

    total_calls: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_tokens: int = 0
    total_estimated_cost_usd: float = 0.0
    total_latency_ms: int = 0
    by_stage: list[StageCostBreakdown] = []


class CostDebugReport(BaseModel):
    """Usage and cost summary over everything a collector has recorded."""

    enabled: bool = False
    pricing_version: str
    breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    warnings: list[str] = []
