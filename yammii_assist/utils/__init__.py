"""
Utility Functions

Modules:
    cost_telemetry: Request-scoped token usage and cost aggregation
"""

from yammii_assist.utils.cost_telemetry import (
    CostCollector,
    current_stage,
    record_usage,
    telemetry_collector,
    telemetry_stage,
)

__all__ = [
    "CostCollector",
    "current_stage",
    "record_usage",
    "telemetry_collector",
    "telemetry_stage",
]
