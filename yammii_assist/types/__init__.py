"""
Type Definitions

Pydantic models for all data structures.

Conversation Models:
    - ConversationTurn, Role - Chat transcript entries

Knowledge Models:
    - KnowledgeItem - Question/answer pair added to the knowledge base
    - ExtractionRequest - Encoded document awaiting extraction

Request Models:
    - RequestConfig - Per-call generation parameters

Result Models:
    - ImportOutcome - Document import result for the session layer
    - CostUsageRecord, CostDebugReport - Cost telemetry

All types are pydantic BaseModel subclasses and serialize to/from JSON.
"""

from yammii_assist.types.conversation import ConversationTurn, Role
from yammii_assist.types.knowledge import ExtractionRequest, KnowledgeItem
from yammii_assist.types.requests import RequestConfig
from yammii_assist.types.results import (
    CostBreakdown,
    CostDebugReport,
    CostUsageRecord,
    ImportOutcome,
    StageCostBreakdown,
)

__all__ = [
    # Conversation
    "ConversationTurn",
    "Role",
    # Knowledge
    "KnowledgeItem",
    "ExtractionRequest",
    # Requests
    "RequestConfig",
    # Results
    "ImportOutcome",
    "CostUsageRecord",
    "StageCostBreakdown",
    "CostBreakdown",
    "CostDebugReport",
]
