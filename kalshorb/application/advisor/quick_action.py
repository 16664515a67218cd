"""
Use case: Run a predefined quick action.

Input: QuickActionCommand (user_id, action_id, session_id)
Output: AdvisorResult
Side effects: None.
Failure cases: None surfaced. Any upstream failure falls back to the
    templated reply for the raw action id.
"""

import logging
from typing import Optional

from kalshorb.application.advisor.dtos import AdvisorResult, QuickActionCommand
from kalshorb.domain.advisor.entities import (
    AdvisoryReply,
    ConversationTurn,
    Role,
)
from kalshorb.domain.advisor.errors import UpstreamCompletionError
from kalshorb.domain.advisor.ports import ChatCompletionPort
from kalshorb.domain.advisor.prompts import PromptSet
from kalshorb.domain.advisor.quick_actions import (
    EMPTY_COMPLETION_MESSAGE,
    QUICK_ACTION_CONFIDENCE,
    resolve_quick_action_prompt,
)
from kalshorb.domain.advisor.scoring import suggest_actions
from kalshorb.domain.advisor.templates import generate_fallback_reply

logger = logging.getLogger(__name__)

DEFAULT_QUICK_ACTION_MAX_TOKENS = 512


class QuickActionUseCase:
    """Sends a canned instruction to the language model.

    Quick actions carry no account context and are not persisted.
    """

    def __init__(
        self,
        completion: ChatCompletionPort,
        prompts: PromptSet = PromptSet(),
        max_tokens: int = DEFAULT_QUICK_ACTION_MAX_TOKENS,
    ) -> None:
        self._completion = completion
        self._prompts = prompts
        self._max_tokens = max_tokens

    async def execute(self, command: QuickActionCommand) -> AdvisorResult:
        """Run the quick action use case.

        Args:
            command: The quick action request.

        Returns:
            The advisor's reply, echoing the session id (possibly None).
        """
        logger.info(
            "Quick action %s for user=%s", command.action_id, command.user_id
        )
        reply = await self._generate_reply(command.action_id)
        return AdvisorResult(
            message=reply.message,
            confidence=reply.confidence,
            suggested_actions=reply.suggested_actions,
            session_id=command.session_id,
        )

    async def _generate_reply(self, action_id: Optional[str]) -> AdvisoryReply:
        if not self._completion.enabled:
            return generate_fallback_reply(action_id, None)

        prompt = resolve_quick_action_prompt(action_id, self._prompts.quick_actions)
        try:
            raw = await self._completion.complete(
                self._prompts.quick_action_system,
                [ConversationTurn(role=Role.USER, content=prompt)],
                max_tokens=self._max_tokens,
            )
        except UpstreamCompletionError as exc:
            logger.warning("Quick action LLM call failed, using fallback: %s", exc.reason)
            return generate_fallback_reply(action_id, None)

        return AdvisoryReply(
            message=raw or EMPTY_COMPLETION_MESSAGE,
            confidence=QUICK_ACTION_CONFIDENCE,
            suggested_actions=suggest_actions(prompt),
        )
