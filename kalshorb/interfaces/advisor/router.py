"""
FastAPI router for the advisor bounded context.

All routes delegate to the dispatcher. No business logic here.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Request

from kalshorb.application.advisor.dispatch import AdvisorDispatcher
from kalshorb.application.advisor.dtos import AdvisorRequest
from kalshorb.interfaces.advisor.dependencies import get_advisor_dispatcher
from kalshorb.interfaces.advisor.schemas import (
    AdvisorReplyData,
    AdvisorRequestBody,
    AdvisorResponse,
    ErrorResponse,
    SuggestedActionItem,
)
from kalshorb.shared.security.rate_limiting import chat_rate_limit, limiter

router = APIRouter(tags=["advisor"])


@router.post(
    "/kalshorb",
    response_model=AdvisorResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
    summary="Ask the advisor",
    description=(
        "Chat with the prediction-market advisor, or run a quick action. "
        "Falls back to rule-based replies when the LLM is unavailable."
    ),
)
@limiter.limit(chat_rate_limit)
async def advise(
    request: Request,
    body: AdvisorRequestBody,
    dispatcher: AdvisorDispatcher = Depends(get_advisor_dispatcher),
) -> AdvisorResponse:
    """Answer a chat message or quick action."""
    result = await dispatcher.dispatch(
        AdvisorRequest(
            user_id=body.user_id,
            session_id=body.session_id,
            message=body.message,
            action=body.action,
            include_context=body.include_context,
        )
    )
    return AdvisorResponse(
        data=AdvisorReplyData(
            message=result.message,
            confidence=result.confidence,
            suggested_actions=[
                SuggestedActionItem(
                    label=a.label, action=a.action, path=a.path, ticker=a.ticker
                )
                for a in result.suggested_actions
            ],
            market_data=result.market_data,
            session_id=result.session_id,
        )
    )
