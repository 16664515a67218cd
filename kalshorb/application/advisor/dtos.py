"""
Data Transfer Objects for the advisor application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from kalshorb.domain.advisor.entities import SuggestedAction


@dataclass(frozen=True)
class AdvisorRequest:
    """Raw inbound request, before dispatch.

    Attributes:
        user_id: Id of the requesting user. Required.
        session_id: Conversation id. Required for chat.
        message: User text for chat, or the quick action id.
        action: "chat" or "quick_action".
        include_context: Whether to personalize with account data.
    """

    user_id: Optional[str]
    session_id: Optional[str] = None
    message: Optional[str] = None
    action: str = "chat"
    include_context: bool = True


@dataclass(frozen=True)
class ChatCommand:
    """Validated input for a chat turn."""

    user_id: str
    session_id: str
    message: str
    include_context: bool = True


@dataclass(frozen=True)
class QuickActionCommand:
    """Validated input for a quick action.

    Attributes:
        user_id: Id of the requesting user.
        action_id: Quick action id; unknown ids fall back to a market overview.
        session_id: Echoed back to the client, may be None.
    """

    user_id: str
    action_id: Optional[str] = None
    session_id: Optional[str] = None


@dataclass(frozen=True)
class AdvisorResult:
    """Output DTO for an advisor reply."""

    message: str
    confidence: int
    suggested_actions: list[SuggestedAction] = field(default_factory=list)
    market_data: Optional[list[dict[str, Any]]] = None
    session_id: Optional[str] = None
