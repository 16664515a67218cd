"""
Tests for the advisor application layer (use cases and dispatcher).

Use cases run against in-memory ports. No real infrastructure needed.
Each test verifies orchestration: ordering, fallback and best-effort
persistence.
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from kalshorb.application.advisor.best_effort import best_effort
from kalshorb.application.advisor.chat import ChatUseCase
from kalshorb.application.advisor.dispatch import AdvisorDispatcher
from kalshorb.application.advisor.dtos import (
    AdvisorRequest,
    ChatCommand,
    QuickActionCommand,
)
from kalshorb.application.advisor.quick_action import QuickActionUseCase
from kalshorb.domain.advisor.entities import (
    AccountContext,
    ChatMessageRecord,
    ConversationTurn,
    Position,
    Role,
)
from kalshorb.domain.advisor.errors import (
    InvalidRequestError,
    PersistenceError,
    UnknownActionError,
)
from kalshorb.domain.advisor.quick_actions import (
    EMPTY_COMPLETION_MESSAGE,
    QUICK_ACTION_PROMPTS,
)
from tests.fakes import (
    InMemoryMessageStore,
    InMemorySessionStore,
    StaticContextReader,
    StubCompletion,
)


def _chat_use_case(
    message_store=None,
    session_store=None,
    context_reader=None,
    completion=None,
    **kwargs,
) -> ChatUseCase:
    return ChatUseCase(
        message_store=message_store or InMemoryMessageStore(),
        session_store=session_store or InMemorySessionStore(),
        context_reader=context_reader or StaticContextReader(),
        completion=completion or StubCompletion(enabled=False),
        today=lambda: date(2026, 1, 2),
        **kwargs,
    )


def _command(message: str = "What is a prediction market?", **kwargs) -> ChatCommand:
    fields = {"user_id": "u1", "session_id": "s1", "message": message}
    fields.update(kwargs)
    return ChatCommand(**fields)


class TestBestEffort:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        result = await best_effort(AsyncMock(return_value=3)(), "op")
        assert result == 3

    @pytest.mark.asyncio
    async def test_swallows_persistence_error(self):
        failing = AsyncMock(side_effect=PersistenceError("t", "down"))
        assert await best_effort(failing(), "op", default=[]) == []

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        failing = AsyncMock(side_effect=RuntimeError("bug"))
        with pytest.raises(RuntimeError):
            await best_effort(failing(), "op")


class TestChatUseCaseFallback:
    """Chat turns answered by templates."""

    @pytest.mark.asyncio
    async def test_fallback_when_llm_disabled(self, message_store, session_store):
        use_case = _chat_use_case(message_store, session_store)
        result = await use_case.execute(_command(include_context=False))

        assert "Prediction markets are financial exchanges" in result.message
        assert result.confidence == 92
        assert result.session_id == "s1"
        assert [a.action for a in result.suggested_actions] == [
            "learn_strategies",
            "navigate",
        ]

    @pytest.mark.asyncio
    async def test_persists_both_turns_in_order(self, message_store, session_store):
        use_case = _chat_use_case(message_store, session_store)
        await use_case.execute(_command())

        roles = [r.role for r in message_store.records]
        assert roles == [Role.USER, Role.ASSISTANT]
        assistant = message_store.records[1]
        assert assistant.confidence_score == 92
        assert assistant.suggested_actions
        assert assistant.market_context is None

    @pytest.mark.asyncio
    async def test_creates_session_once(self, message_store, session_store):
        use_case = _chat_use_case(message_store, session_store)
        long_message = "What is a prediction market? " * 5
        await use_case.execute(_command(long_message))
        await use_case.execute(_command("hello again"))

        session = session_store.sessions["s1"]
        assert len(session["title"]) == 50
        assert session["title"].endswith("...")
        assert session["summary"] == "hello again"

    @pytest.mark.asyncio
    async def test_uses_context_when_requested(self, message_store):
        reader = StaticContextReader(
            AccountContext(
                positions=(
                    Position(quantity=10, avg_price=0.50),
                    Position(quantity=4, avg_price=0.25),
                )
            )
        )
        use_case = _chat_use_case(message_store, context_reader=reader)
        result = await use_case.execute(_command("show my portfolio"))

        assert reader.calls == ["u1"]
        assert "$6.00" in result.message
        assert result.confidence == 85

    @pytest.mark.asyncio
    async def test_skips_context_when_not_requested(self):
        reader = StaticContextReader()
        use_case = _chat_use_case(context_reader=reader)
        await use_case.execute(_command("portfolio", include_context=False))
        assert reader.calls == []

    @pytest.mark.asyncio
    async def test_persistence_failures_do_not_fail_the_turn(self):
        use_case = _chat_use_case(
            InMemoryMessageStore(fail=True), InMemorySessionStore(fail=True)
        )
        result = await use_case.execute(_command("hi"))
        assert result.confidence == 85
        assert result.message.startswith("I'm Kalshorb")

    @pytest.mark.asyncio
    async def test_falls_back_on_upstream_error(self, failing_completion):
        use_case = _chat_use_case(completion=failing_completion)
        result = await use_case.execute(_command("tell me about kalshi"))

        assert len(failing_completion.calls) == 1
        assert result.confidence == 90
        assert result.message.startswith("Kalshi is")


class TestChatUseCaseLLM:
    """Chat turns answered by the language model."""

    @pytest.mark.asyncio
    async def test_llm_reply_is_augmented(self, message_store):
        completion = StubCompletion(reply="Model says hi")
        use_case = _chat_use_case(message_store, completion=completion, top_p=0.95)
        result = await use_case.execute(_command("Should I size my position?"))

        assert result.message == "Model says hi"
        assert result.confidence == 72
        assert [a.label for a in result.suggested_actions] == [
            "View Portfolio",
            "Optimize Positions",
        ]
        call = completion.calls[0]
        assert call["top_p"] == 0.95
        assert "Current date: 2026-01-02" in call["system_prompt"]
        assert message_store.records[-1].content == "Model says hi"

    @pytest.mark.asyncio
    async def test_current_message_sent_once(self):
        completion = StubCompletion(reply="ok")
        use_case = _chat_use_case(completion=completion)
        await use_case.execute(_command("first question"))

        turns = completion.calls[0]["turns"]
        assert turns == [ConversationTurn(role=Role.USER, content="first question")]

    @pytest.mark.asyncio
    async def test_history_window_limits_turns(self):
        store = InMemoryMessageStore()
        for i in range(12):
            role = Role.USER if i % 2 == 0 else Role.ASSISTANT
            store.records.append(
                ChatMessageRecord(user_id="u1", session_id="s1", role=role, content=f"m{i}")
            )
        completion = StubCompletion(reply="ok")
        use_case = _chat_use_case(store, completion=completion)
        await use_case.execute(_command("latest"))

        turns = completion.calls[0]["turns"]
        # 8 prior turns plus the current message
        assert len(turns) == 9
        assert turns[-1].content == "latest"
        assert turns[0].content == "m4"

    @pytest.mark.asyncio
    async def test_context_reaches_system_prompt(self):
        reader = StaticContextReader(
            AccountContext(positions=(Position(quantity=1, avg_price=0.5),))
        )
        completion = StubCompletion(reply="ok")
        use_case = _chat_use_case(context_reader=reader, completion=completion)
        await use_case.execute(_command("hello"))
        assert "- Open Positions: 1" in completion.calls[0]["system_prompt"]


class TestQuickActionUseCase:
    @pytest.mark.asyncio
    async def test_llm_reply(self):
        completion = StubCompletion(reply="Overview text")
        use_case = QuickActionUseCase(completion=completion)
        result = await use_case.execute(
            QuickActionCommand(user_id="u1", action_id="kelly_sizing")
        )

        assert result.message == "Overview text"
        assert result.confidence == 80
        assert [a.label for a in result.suggested_actions] == [
            "View Portfolio",
            "Optimize Positions",
        ]
        call = completion.calls[0]
        assert call["max_tokens"] == 512
        assert call["top_p"] is None
        assert call["turns"][0].content == QUICK_ACTION_PROMPTS["kelly_sizing"]

    @pytest.mark.asyncio
    async def test_unknown_id_uses_market_overview(self):
        completion = StubCompletion(reply="x")
        use_case = QuickActionUseCase(completion=completion)
        result = await use_case.execute(QuickActionCommand(user_id="u1", action_id="zzz"))

        assert completion.calls[0]["turns"][0].content == QUICK_ACTION_PROMPTS["market_overview"]
        assert [a.label for a in result.suggested_actions] == [
            "Browse Markets",
            "View Recommendations",
        ]

    @pytest.mark.asyncio
    async def test_empty_completion_gets_apology(self):
        use_case = QuickActionUseCase(completion=StubCompletion(reply=""))
        result = await use_case.execute(QuickActionCommand(user_id="u1"))
        assert result.message == EMPTY_COMPLETION_MESSAGE

    @pytest.mark.asyncio
    async def test_disabled_llm_uses_greeting_fallback(self, disabled_completion):
        use_case = QuickActionUseCase(completion=disabled_completion)
        result = await use_case.execute(QuickActionCommand(user_id="u1"))

        assert result.confidence == 85
        assert len(result.suggested_actions) == 3
        assert result.session_id is None
        assert disabled_completion.calls == []

    @pytest.mark.asyncio
    async def test_upstream_error_falls_back_on_raw_id(self, failing_completion):
        use_case = QuickActionUseCase(completion=failing_completion)
        result = await use_case.execute(
            QuickActionCommand(user_id="u1", action_id="analyze_portfolio", session_id="s9")
        )
        # "analyze_portfolio" classifies as the portfolio template with no positions.
        assert result.confidence == 80
        assert "don't see any open positions" in result.message
        assert result.session_id == "s9"


class TestAdvisorDispatcher:
    def _dispatcher(self):
        chat = AsyncMock(spec=ChatUseCase)
        quick = AsyncMock(spec=QuickActionUseCase)
        return AdvisorDispatcher(chat=chat, quick_action=quick), chat, quick

    @pytest.mark.asyncio
    async def test_missing_user_id(self):
        dispatcher, chat, _ = self._dispatcher()
        with pytest.raises(InvalidRequestError, match="User ID is required"):
            await dispatcher.dispatch(AdvisorRequest(user_id=None, message="hi"))
        chat.execute.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields", [{"message": "hi"}, {"session_id": "s1"}, {"message": "", "session_id": "s1"}]
    )
    async def test_chat_requires_message_and_session(self, fields):
        dispatcher, chat, _ = self._dispatcher()
        with pytest.raises(InvalidRequestError, match="Message and session ID are required"):
            await dispatcher.dispatch(AdvisorRequest(user_id="u1", **fields))
        chat.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_action(self):
        dispatcher, _, _ = self._dispatcher()
        with pytest.raises(UnknownActionError, match="Unknown action: dance"):
            await dispatcher.dispatch(AdvisorRequest(user_id="u1", action="dance"))

    @pytest.mark.asyncio
    async def test_routes_chat(self):
        dispatcher, chat, quick = self._dispatcher()
        await dispatcher.dispatch(
            AdvisorRequest(user_id="u1", session_id="s1", message="hi", include_context=False)
        )
        chat.execute.assert_awaited_once_with(
            ChatCommand(user_id="u1", session_id="s1", message="hi", include_context=False)
        )
        quick.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_routes_quick_action_without_session(self):
        dispatcher, chat, quick = self._dispatcher()
        await dispatcher.dispatch(
            AdvisorRequest(user_id="u1", message="check_risk", action="quick_action")
        )
        quick.execute.assert_awaited_once_with(
            QuickActionCommand(user_id="u1", action_id="check_risk", session_id=None)
        )
        chat.execute.assert_not_called()
