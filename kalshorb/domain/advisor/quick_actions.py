"""
Predefined quick actions.

Each quick action id maps to a canned instruction sent to the
language model on the user's behalf.
"""

from typing import Optional

DEFAULT_QUICK_ACTION = "market_overview"

QUICK_ACTION_PROMPTS: dict[str, str] = {
    "analyze_portfolio": (
        "Analyze my current portfolio positions and suggest improvements "
        "for risk-adjusted returns."
    ),
    "find_opportunities": (
        "What prediction markets are currently showing good opportunities "
        "based on liquidity and potential edge?"
    ),
    "check_risk": (
        "Review my risk profile and tell me if my current exposure is appropriate."
    ),
    "market_overview": (
        "Give me a brief overview of the current prediction market landscape."
    ),
    "kelly_sizing": (
        "Explain how I should size my positions using the Kelly Criterion "
        "for my risk level."
    ),
}

QUICK_ACTION_CONFIDENCE = 80
EMPTY_COMPLETION_MESSAGE = (
    "I apologize, but I couldn't process that request. Please try again."
)


def resolve_quick_action_prompt(
    action_id: Optional[str], prompts: Optional[dict[str, str]] = None
) -> str:
    """Return the instruction for a quick action id.

    Unknown or missing ids resolve to the market overview prompt.
    """
    table = prompts or QUICK_ACTION_PROMPTS
    if action_id and action_id in table:
        return table[action_id]
    return table.get(DEFAULT_QUICK_ACTION, QUICK_ACTION_PROMPTS[DEFAULT_QUICK_ACTION])
