"""
System prompt construction for LLM mode.

Builds the system-role instruction sent to the chat-completion API:
a static persona, the current date, and whatever account context is
available. Missing context fields are left out, never rendered as
placeholders.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from kalshorb.domain.advisor.entities import DEFAULT_KELLY_FRACTION, AccountContext
from kalshorb.domain.advisor.quick_actions import QUICK_ACTION_PROMPTS

DEFAULT_PERSONA = """You are Kalshorb, an expert AI advisor specializing in prediction markets, with deep knowledge of platforms like Kalshi and Polymarket.

Your expertise includes:
- Prediction market mechanics, pricing, and liquidity analysis
- Risk management and portfolio optimization strategies
- Kelly Criterion for optimal position sizing
- Market analysis and identifying trading opportunities
- Understanding probabilities, expected value, and edge calculation
- Behavioral finance and avoiding common trading biases

Your personality:
- Professional but approachable
- Data-driven and analytical
- Honest about uncertainty and limitations
- Educational when explaining concepts
- Focused on risk-adjusted returns, not gambling

Guidelines:
- Provide actionable insights when possible
- Always consider risk management
- Explain your reasoning clearly
- Use prediction market terminology appropriately
- Avoid definitive price predictions; focus on framework and analysis
- Encourage diversification and proper position sizing"""

DEFAULT_CLOSING = (
    "Respond naturally and helpfully. Always emphasize proper risk management."
)

DEFAULT_QUICK_ACTION_SYSTEM = (
    "You are Kalshorb, an expert AI advisor for prediction markets. "
    "Provide a concise, helpful response."
)


@dataclass(frozen=True)
class PromptSet:
    """Static prompt texts, loadable from configuration."""

    persona: str = DEFAULT_PERSONA
    closing: str = DEFAULT_CLOSING
    quick_action_system: str = DEFAULT_QUICK_ACTION_SYSTEM
    quick_actions: dict[str, str] = field(
        default_factory=lambda: dict(QUICK_ACTION_PROMPTS)
    )


def _context_lines(context: AccountContext) -> list[str]:
    lines: list[str] = []

    portfolio = context.portfolio
    if portfolio is not None:
        if portfolio.total_value is not None:
            lines.append(f"- Total Value: ${portfolio.total_value:.2f}")
        kelly = portfolio.kelly_fraction or DEFAULT_KELLY_FRACTION
        lines.append(f"- Kelly Fraction: {kelly * 100:.0f}%")

    risk = context.risk_profile
    if risk is not None:
        lines.append(f"- Risk Classification: {risk.risk_classification or 'Moderate'}")
        score = risk.risk_score if risk.risk_score else 50
        lines.append(f"- Risk Score: {score:g}/100")

    if context.positions:
        lines.append(f"- Open Positions: {len(context.positions)}")

    return lines


def build_system_prompt(
    context: Optional[AccountContext] = None,
    today: Optional[date] = None,
    prompts: PromptSet = PromptSet(),
) -> str:
    """Build the system prompt for a chat completion.

    Args:
        context: Optional account snapshot.
        today: Date to stamp into the prompt. Defaults to today.
        prompts: Persona and closing texts.

    Returns:
        The complete system prompt.
    """
    today = today or date.today()
    prompt = f"{prompts.persona}\n\nCurrent date: {today.isoformat()}"

    if context is not None:
        lines = _context_lines(context)
        if lines:
            prompt += "\n\nUser's Portfolio Context:\n" + "\n".join(lines)

    return f"{prompt}\n\n{prompts.closing}"
