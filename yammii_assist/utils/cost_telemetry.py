"""
Token usage and cost tracking for model calls.

Telemetry is enabled by attaching a CostCollector via contextvars.
Providers read the active collector and stage and emit usage records.

Example:
    >>> collector = CostCollector()
    >>> with telemetry_collector(collector):
    ...     reply = await composer.converse(history, [])
    >>> collector.summary().breakdown.total_tokens
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar

from yammii_assist.config.pricing import PRICING_VERSION
from yammii_assist.types.results import (
    CostBreakdown,
    CostDebugReport,
    CostUsageRecord,
    StageCostBreakdown,
)

_COLLECTOR: ContextVar[CostCollector | None] = ContextVar(
    "yammii_cost_collector",
    default=None,
)
_STAGE: ContextVar[str] = ContextVar("yammii_cost_stage", default="unknown")


class CostCollector:
    """
    Accumulates provider usage records, usually for one chat session.

    The warning threshold applies to the running total of everything added.
    """

    def __init__(self, *, warn_threshold_usd: float | None = None) -> None:
        self._records: list[CostUsageRecord] = []
        self._warn_threshold_usd = warn_threshold_usd

    @property
    def records(self) -> list[CostUsageRecord]:
        return list(self._records)

    def add(self, record: CostUsageRecord) -> None:
        self._records.append(record)

    def summary(self) -> CostDebugReport:
        """Build aggregate report across all records."""
        by_stage: dict[str, StageCostBreakdown] = {}
        warnings: list[str] = []
        breakdown = CostBreakdown(total_calls=len(self._records))

        for record in self._records:
            breakdown.total_input_tokens += record.input_tokens
            breakdown.total_output_tokens += record.output_tokens
            breakdown.total_tokens += record.total_tokens
            breakdown.total_estimated_cost_usd += record.estimated_cost_usd
            breakdown.total_latency_ms += record.latency_ms

            stage = by_stage.setdefault(record.stage, StageCostBreakdown(stage=record.stage))
            stage.calls += 1
            stage.input_tokens += record.input_tokens
            stage.output_tokens += record.output_tokens
            stage.total_tokens += record.total_tokens
            stage.estimated_cost_usd += record.estimated_cost_usd
            stage.total_latency_ms += record.latency_ms

            if record.metadata.get("pricing_found") is False:
                warnings.append(
                    f"Missing pricing for model '{record.model}' in stage '{record.stage}'. "
                    "Cost shown as 0.0 for those calls."
                )

        total_cost = breakdown.total_estimated_cost_usd
        if self._warn_threshold_usd is not None and total_cost >= self._warn_threshold_usd:
            warnings.append(
                f"Estimated session cost ${total_cost:.6f} over {breakdown.total_calls} model calls "
                f"exceeded threshold ${self._warn_threshold_usd:.6f}."
            )

        breakdown.by_stage = sorted(
            by_stage.values(), key=lambda s: s.estimated_cost_usd, reverse=True
        )
        return CostDebugReport(
            enabled=True,
            pricing_version=PRICING_VERSION,
            breakdown=breakdown,
            warnings=sorted(set(warnings)),
        )


@contextmanager
def telemetry_collector(collector: CostCollector | None):
    """Set active collector for provider instrumentation."""
    token = _COLLECTOR.set(collector)
    try:
        yield
    finally:
        _COLLECTOR.reset(token)


@contextmanager
def telemetry_stage(stage: str):
    """Set pipeline stage label ("converse", "extract") for provider instrumentation."""
    token = _STAGE.set(stage)
    try:
        yield
    finally:
        _STAGE.reset(token)


def current_stage() -> str:
    return _STAGE.get()


def record_usage(record: CostUsageRecord) -> None:
    """Add record to active collector if telemetry is enabled."""
    collector = _COLLECTOR.get()
    if collector is not None:
        collector.add(record)
