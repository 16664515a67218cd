"""
Request dispatcher for the advisor endpoint.

Validates the raw request and routes it to the chat or quick action
use case. Validation failures surface immediately; there is no
fallback for a malformed request.
"""

from kalshorb.application.advisor.chat import ChatUseCase
from kalshorb.application.advisor.dtos import (
    AdvisorRequest,
    AdvisorResult,
    ChatCommand,
    QuickActionCommand,
)
from kalshorb.application.advisor.quick_action import QuickActionUseCase
from kalshorb.domain.advisor.entities import RequestAction
from kalshorb.domain.advisor.errors import InvalidRequestError, UnknownActionError


class AdvisorDispatcher:
    """Routes an AdvisorRequest to the matching use case."""

    def __init__(
        self, chat: ChatUseCase, quick_action: QuickActionUseCase
    ) -> None:
        self._chat = chat
        self._quick_action = quick_action

    async def dispatch(self, request: AdvisorRequest) -> AdvisorResult:
        """Validate and execute a request.

        Raises:
            InvalidRequestError: If user_id is missing, or message or
                session_id is missing for a chat.
            UnknownActionError: If the action is not supported.
        """
        if not request.user_id:
            raise InvalidRequestError("User ID is required")

        try:
            action = RequestAction(request.action)
        except ValueError:
            raise UnknownActionError(str(request.action)) from None

        if action is RequestAction.CHAT:
            if not request.message or not request.session_id:
                raise InvalidRequestError("Message and session ID are required")
            return await self._chat.execute(
                ChatCommand(
                    user_id=request.user_id,
                    session_id=request.session_id,
                    message=request.message,
                    include_context=request.include_context,
                )
            )

        return await self._quick_action.execute(
            QuickActionCommand(
                user_id=request.user_id,
                action_id=request.message,
                session_id=request.session_id,
            )
        )
