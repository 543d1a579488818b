"""Tests for request-scoped cost telemetry aggregation."""

import pytest

from yammii_assist.config.pricing import PRICING_VERSION, estimate_llm_cost_usd
from yammii_assist.types.results import CostUsageRecord
from yammii_assist.utils.cost_telemetry import (
    CostCollector,
    current_stage,
    record_usage,
    telemetry_collector,
    telemetry_stage,
)


def _record(stage: str, *, cost: float, model: str = "gemini-2.5-flash", **kwargs) -> CostUsageRecord:
    return CostUsageRecord(
        provider="google",
        model=model,
        operation=kwargs.pop("operation", "send_chat"),
        stage=stage,
        estimated_cost_usd=cost,
        **kwargs,
    )


def test_cost_collector_aggregates_by_stage() -> None:
    """Collector should aggregate totals and per-stage metrics."""
    collector = CostCollector()
    collector.add(
        _record("converse", cost=0.001, input_tokens=100, output_tokens=20, total_tokens=120, latency_ms=15)
    )
    collector.add(
        _record(
            "extract",
            cost=0.0001,
            operation="generate_with_file",
            input_tokens=50,
            total_tokens=50,
            latency_ms=5,
            estimated=True,
        )
    )
    collector.add(_record("converse", cost=0.002, input_tokens=10, output_tokens=10, total_tokens=20))

    report = collector.summary()
    assert report.enabled is True
    assert report.pricing_version == PRICING_VERSION
    assert report.breakdown.total_calls == 3
    assert report.breakdown.total_tokens == 190
    assert report.breakdown.total_input_tokens == 160
    assert report.breakdown.total_output_tokens == 30
    assert report.breakdown.total_latency_ms == 20
    assert [s.stage for s in report.breakdown.by_stage] == ["converse", "extract"]
    assert report.breakdown.by_stage[0].calls == 2


def test_cost_collector_warns_on_threshold() -> None:
    """Threshold is checked against the total of all records, not single calls."""
    collector = CostCollector(warn_threshold_usd=0.0015)
    collector.add(_record("converse", cost=0.001))
    assert collector.summary().warnings == []

    collector.add(_record("extract", cost=0.001))

    report = collector.summary()
    assert report.warnings == [
        "Estimated session cost $0.002000 over 2 model calls exceeded threshold $0.001500."
    ]


def test_cost_collector_warns_on_missing_pricing() -> None:
    collector = CostCollector()
    collector.add(_record("extract", cost=0.0, model="gemini-9", metadata={"pricing_found": False}))
    collector.add(_record("extract", cost=0.0, model="gemini-9", metadata={"pricing_found": False}))

    report = collector.summary()
    assert len(report.warnings) == 1
    assert "gemini-9" in report.warnings[0]


def test_record_usage_without_collector_is_noop() -> None:
    record_usage(_record("converse", cost=0.1))


def test_context_managers_restore_previous_values() -> None:
    outer, inner = CostCollector(), CostCollector()

    with telemetry_collector(outer), telemetry_stage("converse"):
        with telemetry_collector(inner), telemetry_stage("extract"):
            assert current_stage() == "extract"
            record_usage(_record(current_stage(), cost=0.0))
        assert current_stage() == "converse"
        record_usage(_record(current_stage(), cost=0.0))

    assert current_stage() == "unknown"
    assert [r.stage for r in inner.records] == ["extract"]
    assert [r.stage for r in outer.records] == ["converse"]


def test_estimate_llm_cost() -> None:
    cost, found = estimate_llm_cost_usd("gemini-2.5-flash", input_tokens=1_000_000, output_tokens=1_000_000)
    assert found is True
    assert cost == pytest.approx(0.30 + 2.50)

    cost, found = estimate_llm_cost_usd("unknown-model", input_tokens=1000, output_tokens=1000)
    assert found is False
    assert cost == 0.0
