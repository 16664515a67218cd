"""
Use case: Answer a chat message from a user.

Input: ChatCommand (user_id, session_id, message, include_context)
Output: AdvisorResult
Side effects: Persists the user turn, the assistant turn and session
    metadata. All writes are best effort.
Failure cases: None surfaced. Upstream LLM failures fall back to
    templated replies; persistence failures are logged.
"""

import logging
from datetime import date
from typing import Callable, Optional

from kalshorb.application.advisor.best_effort import best_effort
from kalshorb.application.advisor.dtos import AdvisorResult, ChatCommand
from kalshorb.domain.advisor.entities import (
    AccountContext,
    AdvisoryReply,
    ChatMessageRecord,
    ConversationTurn,
    Role,
)
from kalshorb.domain.advisor.errors import UpstreamCompletionError
from kalshorb.domain.advisor.ports import (
    AccountContextReader,
    ChatCompletionPort,
    MessageStore,
    SessionStore,
)
from kalshorb.domain.advisor.prompts import PromptSet, build_system_prompt
from kalshorb.domain.advisor.scoring import augment_llm_reply
from kalshorb.domain.advisor.sessions import session_summary, session_title
from kalshorb.domain.advisor.templates import generate_fallback_reply

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10
DEFAULT_HISTORY_WINDOW = 8


class ChatUseCase:
    """Orchestrates a single chat turn.

    The user's message is persisted before the reply is generated and
    the assistant's reply after it. The reply comes from the language
    model when one is configured, otherwise from the templates.
    """

    def __init__(
        self,
        message_store: MessageStore,
        session_store: SessionStore,
        context_reader: AccountContextReader,
        completion: ChatCompletionPort,
        prompts: PromptSet = PromptSet(),
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        top_p: Optional[float] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._messages = message_store
        self._sessions = session_store
        self._context_reader = context_reader
        self._completion = completion
        self._prompts = prompts
        self._history_limit = history_limit
        self._history_window = history_window
        self._top_p = top_p
        self._today = today

    async def execute(self, command: ChatCommand) -> AdvisorResult:
        """Run the chat use case.

        Args:
            command: The validated chat request.

        Returns:
            The advisor's reply, echoing the session id.
        """
        logger.info(
            "Chat turn for user=%s, session=%s, include_context=%s",
            command.user_id,
            command.session_id,
            command.include_context,
        )

        await best_effort(
            self._messages.save(
                ChatMessageRecord(
                    user_id=command.user_id,
                    session_id=command.session_id,
                    role=Role.USER,
                    content=command.message,
                )
            ),
            "save user message",
        )
        await best_effort(self._ensure_session(command), "ensure session")

        context: Optional[AccountContext] = None
        if command.include_context:
            context = await self._context_reader.fetch(command.user_id)

        history = await best_effort(
            self._messages.recent_history(command.session_id, self._history_limit),
            "load history",
            default=[],
        )

        reply = await self._generate_reply(command.message, history or [], context)

        await best_effort(
            self._messages.save(
                ChatMessageRecord(
                    user_id=command.user_id,
                    session_id=command.session_id,
                    role=Role.ASSISTANT,
                    content=reply.message,
                    confidence_score=reply.confidence,
                    suggested_actions=reply.suggested_actions,
                    market_context=(
                        {"markets": reply.market_data} if reply.market_data else None
                    ),
                )
            ),
            "save assistant message",
        )
        await best_effort(
            self._sessions.touch(command.session_id, session_summary(command.message)),
            "update session",
        )

        return AdvisorResult(
            message=reply.message,
            confidence=reply.confidence,
            suggested_actions=reply.suggested_actions,
            market_data=reply.market_data,
            session_id=command.session_id,
        )

    async def _ensure_session(self, command: ChatCommand) -> None:
        if await self._sessions.exists(command.session_id):
            return
        await self._sessions.create(
            session_id=command.session_id,
            user_id=command.user_id,
            title=session_title(command.message),
        )

    async def _generate_reply(
        self,
        message: str,
        history: list[ConversationTurn],
        context: Optional[AccountContext],
    ) -> AdvisoryReply:
        if not self._completion.enabled:
            return generate_fallback_reply(message, context)

        turns = self._prior_turns(message, history)
        turns.append(ConversationTurn(role=Role.USER, content=message))
        system_prompt = build_system_prompt(context, self._today(), self._prompts)

        try:
            raw = await self._completion.complete(
                system_prompt, turns, top_p=self._top_p
            )
        except UpstreamCompletionError as exc:
            logger.warning("LLM unavailable, using fallback reply: %s", exc.reason)
            return generate_fallback_reply(message, context)

        return augment_llm_reply(raw, message)

    def _prior_turns(
        self, message: str, history: list[ConversationTurn]
    ) -> list[ConversationTurn]:
        """Return the turns sent to the model ahead of the current message.

        History is read after the user turn was saved, so its last entry
        is normally the current message. That entry is dropped before the
        window is applied: the model sees the current message once,
        preceded by up to ``history_window`` earlier turns.
        """
        if history and history[-1] == ConversationTurn(role=Role.USER, content=message):
            history = history[:-1]
        return list(history[-self._history_window:])
