"""
Confidence scoring and follow-up actions for LLM replies.

These keyword tables are deliberately separate from the fallback
intent classifier in ``intent.py``; the two taxonomies differ and
are kept apart.
"""

from kalshorb.domain.advisor.entities import AdvisoryReply, SuggestedAction

MAX_SUGGESTED_ACTIONS = 3
DEFAULT_LLM_CONFIDENCE = 78

CONFIDENCE_RULES: list[tuple[tuple[str, ...], int]] = [
    (("how", "what is", "explain"), 88),
    (("should i", "recommend"), 72),
    (("predict", "will"), 65),
]

ACTION_RULES: list[tuple[tuple[str, ...], list[SuggestedAction]]] = [
    (
        ("portfolio", "position"),
        [
            SuggestedAction(label="View Portfolio", action="navigate", path="/portfolio"),
            SuggestedAction(label="Optimize Positions", action="optimize_portfolio"),
        ],
    ),
    (
        ("risk", "safe"),
        [
            SuggestedAction(label="Check Risk Profile", action="navigate", path="/analytics"),
            SuggestedAction(label="Adjust Risk Settings", action="navigate", path="/settings"),
        ],
    ),
    (
        ("market", "opportunity"),
        [
            SuggestedAction(label="Browse Markets", action="navigate", path="/markets"),
            SuggestedAction(
                label="View Recommendations", action="navigate", path="/recommendations"
            ),
        ],
    ),
    (
        ("kelly", "size", "allocation"),
        [
            SuggestedAction(label="Calculate Position Size", action="calculate_kelly"),
            SuggestedAction(label="Portfolio Settings", action="navigate", path="/settings"),
        ],
    ),
]

DEFAULT_ACTIONS = [
    SuggestedAction(label="Explore Markets", action="navigate", path="/markets"),
    SuggestedAction(label="View Analytics", action="navigate", path="/analytics"),
]


def score_confidence(user_message: str) -> int:
    """Return the confidence attached to an LLM reply for this question."""
    text = user_message.lower()
    for keywords, confidence in CONFIDENCE_RULES:
        if any(k in text for k in keywords):
            return confidence
    return DEFAULT_LLM_CONFIDENCE


def suggest_actions(message: str) -> list[SuggestedAction]:
    """Return up to three follow-up actions for a message."""
    text = message.lower()
    for keywords, actions in ACTION_RULES:
        if any(k in text for k in keywords):
            return list(actions[:MAX_SUGGESTED_ACTIONS])
    return list(DEFAULT_ACTIONS[:MAX_SUGGESTED_ACTIONS])


def augment_llm_reply(raw_reply: str, user_message: str) -> AdvisoryReply:
    """Wrap raw model output with a local confidence score and actions.

    The model text is returned unchanged.
    """
    return AdvisoryReply(
        message=raw_reply,
        confidence=score_confidence(user_message),
        suggested_actions=suggest_actions(user_message),
    )
