"""
Keyword-based intent classifier for fallback replies.

Maps a free-text message to exactly one Topic. Rules are evaluated
in list order and the first match wins, so a message mentioning
several topics always resolves to the earliest rule.
"""

from typing import Callable, Optional

from kalshorb.domain.advisor.entities import Topic

Predicate = Callable[[str], bool]


def _any(*keywords: str) -> Predicate:
    return lambda text: any(k in text for k in keywords)


def _market_basics(text: str) -> bool:
    return "what" in text and (
        "prediction market" in text or "prediction markets" in text
    )


def _position_sizing(text: str) -> bool:
    return "kelly" in text or ("position" in text and "size" in text)


INTENT_RULES: list[tuple[Topic, Predicate]] = [
    (Topic.MARKET_BASICS, _market_basics),
    (Topic.POSITION_SIZING, _position_sizing),
    (Topic.PORTFOLIO, _any("portfolio", "positions", "holdings")),
    (Topic.RISK, _any("risk", "danger", "safe")),
    (Topic.RECOMMENDATIONS, _any("recommend", "suggest", "opportunity", "what should")),
    (Topic.PERFORMANCE, _any("performance", "return", "profit", "analytics")),
    (Topic.KALSHI, _any("kalshi")),
]


def classify_intent(message: Optional[str]) -> Topic:
    """Return the topic of a user message.

    Args:
        message: Raw user text. None or empty yields Topic.GREETING.

    Returns:
        The first Topic whose rule matches, else Topic.GREETING.
    """
    text = (message or "").lower()
    for topic, matches in INTENT_RULES:
        if matches(text):
            return topic
    return Topic.GREETING
