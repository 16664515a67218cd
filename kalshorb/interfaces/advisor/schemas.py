"""
Pydantic schemas for advisor API request/response validation.

These schemas define the API contract. Required-field rules for each
action are enforced by the dispatcher so that every failure shares
the same error shape.
No business logic belongs here.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class AdvisorRequestBody(BaseModel):
    """Request schema for the advisor endpoint.

    Attributes:
        user_id: Id of the requesting user.
        session_id: Conversation id; required for chat.
        message: User text for chat, or the quick action id.
        action: "chat" (default) or "quick_action".
        include_context: Personalize the reply with account data.
    """

    user_id: Optional[str] = Field(default=None, description="Requesting user id")
    session_id: Optional[str] = Field(default=None, description="Conversation id")
    message: Optional[str] = Field(
        default=None, description="User message, or quick action id"
    )
    action: str = Field(default="chat", description="chat or quick_action")
    include_context: bool = Field(
        default=True, description="Include positions, risk and portfolio context"
    )


class SuggestedActionItem(BaseModel):
    """A follow-up action button for the client."""

    label: str
    action: str
    path: Optional[str] = None
    ticker: Optional[str] = None


class AdvisorReplyData(BaseModel):
    """The advisor reply payload."""

    message: str
    confidence: int = Field(..., ge=0, le=100)
    suggested_actions: list[SuggestedActionItem]
    market_data: Optional[list[dict[str, Any]]] = None
    session_id: Optional[str] = None


class AdvisorResponse(BaseModel):
    """Response schema for the advisor endpoint."""

    data: AdvisorReplyData


class ErrorDetail(BaseModel):
    """Error code and message."""

    code: Literal["KALSHORB_ERROR"] = "KALSHORB_ERROR"
    message: str


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str
    version: str
