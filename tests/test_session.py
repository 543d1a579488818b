"""
Tests for SupportSession

The provider is mocked; knowledge assets are built in memory.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from yammii_assist.api.session import (
    IMPORT_FAILED_MESSAGE,
    NO_CONTENT_MESSAGE,
    SupportSession,
)
from yammii_assist.assistant.prompts import PROVIDER_ERROR_FALLBACK
from yammii_assist.config.settings import AssistConfig
from yammii_assist.knowledge.assets import KnowledgeAssets
from yammii_assist.types.conversation import ConversationTurn
from yammii_assist.types.knowledge import ExtractionRequest, KnowledgeItem
from yammii_assist.types.results import CostUsageRecord
from yammii_assist.utils.cost_telemetry import current_stage, record_usage

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def config(monkeypatch) -> AssistConfig:
    monkeypatch.delenv("YAMMII_COST_DEBUG_WARN_THRESHOLD_USD", raising=False)
    return AssistConfig(google_api_key="test-key", greeting="你好！有什么可以帮您？")


@pytest.fixture
def assets() -> KnowledgeAssets:
    return KnowledgeAssets(
        base_document="1. **刷卡机掉线怎么办？**\n   * 重新配对。\n2. **打印机不出纸？**\n   * 检查纸卷。\n",
        prompt_template="只根据知识库回答。\n{{KNOWLEDGE_BASE}}",
    )


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create a mock LLM provider."""
    llm = MagicMock()
    llm.send_chat = AsyncMock(return_value="请重新配对刷卡机。")
    llm.generate_with_file = AsyncMock(return_value='[{"question":"Q1","answer":"A1"}]')
    llm.model_name = "test-model"
    return llm


@pytest.fixture
def session(config, assets, mock_llm) -> SupportSession:
    return SupportSession(config, llm=mock_llm, assets=assets)


def _text_request() -> ExtractionRequest:
    return ExtractionRequest.from_bytes("Q1: A1".encode(), "text/plain", file_name="faq.txt")


# -----------------------------------------------------------------------------
# Transcript
# -----------------------------------------------------------------------------


class TestTranscript:
    def test_starts_with_greeting(self, session):
        assert session.messages == [ConversationTurn.from_model("你好！有什么可以帮您？")]

    def test_no_greeting_when_disabled(self, assets, mock_llm):
        session = SupportSession(AssistConfig(greeting=""), llm=mock_llm, assets=assets)
        assert session.messages == []

    def test_messages_is_a_copy(self, session):
        session.messages.append(ConversationTurn.from_user("x"))
        assert len(session.messages) == 1

    @pytest.mark.asyncio
    async def test_ask_records_both_turns(self, session, mock_llm):
        reply = await session.ask("  刷卡机掉线怎么办？ ")

        assert reply == "请重新配对刷卡机。"
        assert [t.role for t in session.messages] == ["model", "user", "model"]
        assert session.messages[1].text == "刷卡机掉线怎么办？"
        assert session.messages[2].text == reply

        history, message = mock_llm.send_chat.call_args.args
        assert message == "刷卡机掉线怎么办？"
        assert [t.role for t in history] == ["model"]

    @pytest.mark.asyncio
    async def test_blank_question_ignored(self, session, mock_llm):
        assert await session.ask("   ") is None
        mock_llm.send_chat.assert_not_awaited()
        assert len(session.messages) == 1

    @pytest.mark.asyncio
    async def test_provider_failure_still_recorded(self, session, mock_llm):
        mock_llm.send_chat.side_effect = RuntimeError("network down")

        reply = await session.ask("你好")

        assert reply == PROVIDER_ERROR_FALLBACK
        assert session.messages[-1] == ConversationTurn.from_model(PROVIDER_ERROR_FALLBACK)

    @pytest.mark.asyncio
    async def test_added_knowledge_reaches_prompt(self, session, mock_llm):
        session.add_manual_knowledge("如何退款？", "在订单详情中点击退款。")

        await session.ask("如何退款？")

        instruction = mock_llm.send_chat.call_args.kwargs["config"].system_instruction
        assert "1000. **如何退款？**" in instruction
        assert "   * 在订单详情中点击退款。" in instruction

    def test_ask_sync(self, session):
        assert session.ask_sync("你好") == "请重新配对刷卡机。"

    @pytest.mark.asyncio
    async def test_reset(self, session):
        await session.ask("你好")
        session.add_manual_knowledge("Q", "A")

        session.reset()

        assert len(session.messages) == 1
        assert session.extra_knowledge == []


# -----------------------------------------------------------------------------
# Knowledge
# -----------------------------------------------------------------------------


class TestManualKnowledge:
    def test_add(self, session):
        item = session.add_manual_knowledge("如何退款？", "点击退款。")
        assert session.extra_knowledge == [item]

    @pytest.mark.parametrize("question,answer", [("", "A"), ("Q", ""), ("  ", "A"), ("Q", "\n")])
    def test_both_fields_required(self, session, question, answer):
        with pytest.raises(ValueError, match="required"):
            session.add_manual_knowledge(question, answer)
        assert session.extra_knowledge == []

    def test_add_knowledge_appends_in_order(self, session):
        items = [KnowledgeItem(question=f"Q{i}", answer=f"A{i}") for i in range(3)]
        assert session.add_knowledge(items) == 3
        assert session.add_knowledge(items[:1]) == 1
        assert session.extra_knowledge == items + items[:1]

    def test_stats(self, session):
        session.add_manual_knowledge("Q", "A")
        assert session.stats() == {"base_entries": 2, "added_entries": 1, "messages": 1}


class TestImportDocument:
    @pytest.mark.asyncio
    async def test_success_adds_items(self, session):
        outcome = await session.import_document(_text_request())

        assert outcome.ok is True
        assert outcome.added == 1
        assert outcome.message is None
        assert session.extra_knowledge == [KnowledgeItem(question="Q1", answer="A1")]

    @pytest.mark.asyncio
    async def test_empty_result(self, session, mock_llm):
        mock_llm.generate_with_file.return_value = "[]"

        outcome = await session.import_document(_text_request())

        assert outcome.ok is True
        assert outcome.added == 0
        assert outcome.message == NO_CONTENT_MESSAGE
        assert session.extra_knowledge == []

    @pytest.mark.asyncio
    async def test_failure_adds_nothing(self, session, mock_llm):
        mock_llm.generate_with_file.return_value = '[{"question":"Q1"'

        outcome = await session.import_document(_text_request())

        assert outcome.ok is False
        assert outcome.message == IMPORT_FAILED_MESSAGE
        assert session.extra_knowledge == []

    @pytest.mark.asyncio
    async def test_from_path(self, session, mock_llm, tmp_path):
        path = tmp_path / "faq.md"
        path.write_text("Q1: A1", encoding="utf-8")

        outcome = await session.import_document(path, "text/markdown")

        assert outcome.added == 1
        assert mock_llm.generate_with_file.call_args.kwargs["mime_type"] == "text/markdown"

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, session, tmp_path):
        with pytest.raises(FileNotFoundError):
            await session.import_document(tmp_path / "missing.pdf")

    def test_import_document_sync(self, session):
        assert session.import_document_sync(_text_request()).added == 1


# -----------------------------------------------------------------------------
# Cost report
# -----------------------------------------------------------------------------


def _recording(reply: str, tokens: int, cost: float):
    """Provider double that records usage the way a real provider does."""

    async def _call(*args, **kwargs):
        record_usage(
            CostUsageRecord(
                provider="google",
                model="test-model",
                operation="call",
                stage=current_stage(),
                input_tokens=tokens,
                total_tokens=tokens,
                estimated_cost_usd=cost,
            )
        )
        return reply

    return _call


class TestCostReport:
    @pytest.mark.asyncio
    async def test_collects_usage_by_stage(self, session, mock_llm):
        mock_llm.send_chat.side_effect = _recording("好的", 100, 0.001)
        mock_llm.generate_with_file.side_effect = _recording("[]", 50, 0.0005)

        await session.ask("你好")
        await session.import_document(_text_request())

        report = session.cost_report()
        assert report.breakdown.total_calls == 2
        assert report.breakdown.total_tokens == 150
        assert {s.stage for s in report.breakdown.by_stage} == {"converse", "extract"}
        assert report.warnings == []

    @pytest.mark.asyncio
    async def test_threshold_from_config(self, assets, mock_llm):
        mock_llm.send_chat.side_effect = _recording("好的", 100, 0.01)
        session = SupportSession(
            AssistConfig(cost_debug_warn_threshold_usd=0.005), llm=mock_llm, assets=assets
        )

        await session.ask("你好")

        assert any("exceeded threshold" in w for w in session.cost_report().warnings)

    @pytest.mark.asyncio
    async def test_threshold_applies_to_session_total(self, assets, mock_llm):
        """No single call crosses the threshold; the running total does."""
        mock_llm.send_chat.side_effect = _recording("好的", 100, 0.003)
        session = SupportSession(
            AssistConfig(cost_debug_warn_threshold_usd=0.005), llm=mock_llm, assets=assets
        )

        await session.ask("第一个问题")
        assert session.cost_report().warnings == []

        await session.ask("第二个问题")
        [warning] = session.cost_report().warnings
        assert "session cost $0.006000 over 2 model calls" in warning

    def test_empty_report(self, session):
        report = session.cost_report()
        assert report.breakdown.total_calls == 0
        assert report.pricing_version


class TestConstruction:
    def test_builds_provider_and_assets_from_config(self, monkeypatch):
        provider = SimpleNamespace(model_name="gemini-2.5-pro")
        monkeypatch.setattr(
            "yammii_assist.providers.create_llm_provider", lambda config: provider
        )

        session = SupportSession(AssistConfig(llm_model="gemini-2.5-pro"))

        assert session.llm is provider
        assert session.assets.base_entry_count == 20
