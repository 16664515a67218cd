"""
Domain entities for the advisor bounded context.

Entities are transient snapshots rebuilt on every request.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# Fallback Kelly fraction used wherever a portfolio does not carry one.
DEFAULT_KELLY_FRACTION = 0.5


class Topic(Enum):
    """Conversation topic recognized by the intent classifier."""

    MARKET_BASICS = "market_basics"
    POSITION_SIZING = "position_sizing"
    PORTFOLIO = "portfolio"
    RISK = "risk"
    RECOMMENDATIONS = "recommendations"
    PERFORMANCE = "performance"
    KALSHI = "kalshi"
    GREETING = "greeting"


class Role(Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class RequestAction(Enum):
    """Operation requested by the client."""

    CHAT = "chat"
    QUICK_ACTION = "quick_action"


@dataclass(frozen=True)
class Position:
    """An open position on a prediction market contract."""

    quantity: float
    avg_price: float
    market_ticker: Optional[str] = None
    side: Optional[str] = None

    @property
    def cost_basis(self) -> float:
        """Return quantity × average entry price."""
        return self.quantity * self.avg_price


@dataclass(frozen=True)
class RiskAssessment:
    """The user's current behavioral risk assessment."""

    risk_score: Optional[float] = None
    risk_classification: Optional[str] = None


@dataclass(frozen=True)
class Portfolio:
    """Aggregated metrics of the user's active portfolio.

    Every metric is optional; zero and None are both treated as
    "not available" by the reply templates.
    """

    total_value: Optional[float] = None
    pnl_total: Optional[float] = None
    pnl_percent: Optional[float] = None
    sharpe_ratio: Optional[float] = None
    kelly_fraction: Optional[float] = None


@dataclass(frozen=True)
class AccountContext:
    """Read-only snapshot of the user's account used to personalize replies."""

    positions: tuple[Position, ...] = ()
    risk_profile: Optional[RiskAssessment] = None
    portfolio: Optional[Portfolio] = None

    @property
    def total_position_value(self) -> float:
        """Return the summed cost basis of all open positions."""
        return sum(p.cost_basis for p in self.positions)


@dataclass(frozen=True)
class ConversationTurn:
    """A single message of a conversation, as fed to the LLM."""

    role: Role
    content: str


@dataclass(frozen=True)
class SuggestedAction:
    """A follow-up action the client can render as a button.

    Attributes:
        label: Button text.
        action: Opaque client-side verb (e.g. "navigate").
        path: Client route for navigate actions.
        ticker: Market ticker the action refers to, if any.
    """

    label: str
    action: str
    path: Optional[str] = None
    ticker: Optional[str] = None


@dataclass(frozen=True)
class AdvisoryReply:
    """Structured advisor reply returned to the client."""

    message: str
    confidence: int
    suggested_actions: list[SuggestedAction] = field(default_factory=list)
    market_data: Optional[list[dict[str, Any]]] = None


@dataclass(frozen=True)
class ChatMessageRecord:
    """A chat turn as written to the message store."""

    user_id: str
    session_id: str
    role: Role
    content: str
    confidence_score: Optional[int] = None
    suggested_actions: Optional[list[SuggestedAction]] = None
    market_context: Optional[dict[str, Any]] = None
