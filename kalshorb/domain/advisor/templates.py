"""
Rule-based reply generator (fallback mode).

Produces a templated reply for each Topic, personalized with the
user's AccountContext where the template calls for it. Used whenever
the upstream language model is unavailable or not configured.

Confidence scores are fixed per template, not computed.
"""

from typing import Callable, Optional

from kalshorb.domain.advisor.entities import (
    DEFAULT_KELLY_FRACTION,
    AccountContext,
    AdvisoryReply,
    SuggestedAction,
    Topic,
)
from kalshorb.domain.advisor.intent import classify_intent

DEFAULT_RISK_CLASSIFICATION = "moderate"

_MARKET_BASICS_TEXT = """Prediction markets are financial exchanges where participants trade contracts whose payouts depend on the outcomes of future events.

Here's how they work:

**Core Mechanics:**
- You buy "Yes" or "No" contracts on specific outcomes (e.g., "Will X win the election?")
- Contracts typically pay $1 if correct, $0 if wrong
- Current prices reflect the crowd's probability estimate

**Key Platforms:**
- **Kalshi** - CFTC-regulated, focuses on economic and political events
- **Polymarket** - Crypto-based, broader event coverage
- **PredictIt** - Academic-focused political markets

**Why They Matter:**
- Aggregate diverse information efficiently
- Often more accurate than polls or expert forecasts
- Provide real-time probability updates

Would you like me to explain trading strategies or risk management?"""

_POSITION_SIZING_TEXT = """The Kelly Criterion is a mathematical formula for optimal bet sizing that maximizes long-term growth while managing risk.

**The Formula:**
Kelly % = (p × b - q) / b

Where:
- p = probability of winning
- q = probability of losing (1 - p)
- b = odds received (payout ratio)

**Example:**
If you believe a market has 60% chance but is priced at 50 cents:
- Edge = 0.60 × 1 - 0.40 = 0.20 (20% edge)
- Kelly suggests betting 20% of bankroll

**In Practice:**
- Most traders use "fractional Kelly" (typically 25-50% of full Kelly)
- Your current Kelly fraction is set to {kelly_pct}%
- This provides a buffer against estimation errors

**Benefits of Fractional Kelly:**
- Reduces volatility significantly
- Protects against overconfidence in probability estimates
- Still captures most of the long-term growth

Would you like me to calculate position sizes for specific markets?"""

_EMPTY_PORTFOLIO_TEXT = """I don't see any open positions in your portfolio yet.

**Getting Started:**
1. Browse available markets to find opportunities
2. Use the Kelly Criterion to size your positions appropriately
3. Start with smaller positions to get comfortable with the platform
4. Diversify across different event types to manage risk

**Recommended First Steps:**
- Set your risk tolerance in Settings
- Review AI-generated recommendations
- Start with high-liquidity markets (higher volume = easier entry/exit)

Would you like me to show you some recommended markets based on your risk profile?"""

_PORTFOLIO_TEXT = """Here's your portfolio overview:

**Current Holdings:**
- {count} open position{plural}
- Estimated value: ${total_value:.2f}

**Portfolio Health Tips:**
- Monitor correlation between positions (avoid concentration in similar events)
- Review position sizes relative to your Kelly fraction
- Set mental stop-losses for each position
- Regularly reassess your probability estimates
{performance}
Would you like a detailed analysis of any specific position?"""

_RISK_PROFILE_TEXT = """Based on your trading patterns, here's your risk assessment:

**Risk Profile: {classification}**
- Risk Score: {score}/100

**What This Means:**
{explanation}

**Risk Management Tips:**
- Never risk more than 1-5% of portfolio on a single trade
- Diversify across uncorrelated events
- Use fractional Kelly sizing
- Set clear exit criteria before entering positions
- Review and adjust regularly

Would you like recommendations aligned with your risk profile?"""

_NO_RISK_PROFILE_TEXT = """I don't have enough trading history to fully assess your risk profile yet.

**Building Your Risk Profile:**
As you make trades, I'll analyze your behavior to understand:
- Position sizing preferences
- Risk tolerance patterns
- Trading frequency
- Reaction to market movements

**In the Meantime:**
You can set your preferred risk level in Settings. This helps me provide better recommendations tailored to your comfort level.

**Risk Levels Explained:**
- **Conservative**: Focus on high-probability, lower-return trades
- **Moderate**: Balanced approach with reasonable risk/reward
- **Aggressive**: Higher risk trades with larger potential returns
- **Speculative**: Maximum risk tolerance for experienced traders"""

_RECOMMENDATIONS_TEXT = """Here are my recommendations for finding good prediction market opportunities:

**Key Factors to Evaluate:**

1. **Liquidity** - Higher volume markets allow easier entry/exit
2. **Information Edge** - Do you have insight the market hasn't priced in?
3. **Time to Resolution** - Shorter timeframes mean faster capital turnover
4. **Probability Mispricing** - Look for markets where you disagree with current odds

**Current Market Categories Worth Watching:**
- Political events (elections, policy decisions)
- Economic indicators (inflation, employment data)
- Sports outcomes (if legal in your jurisdiction)
- Technology milestones

**Strategy Tips:**
- Start with markets you understand well
- Compare your probability estimates to market prices
- Calculate expected value before trading
- Consider correlation with your existing positions

Check the Recommendations page for AI-curated opportunities matching your profile."""

_PERFORMANCE_TEXT = """Here's your performance summary:

**Portfolio Metrics:**
- Total Value: ${total_value:.2f}
- Total P&L: ${pnl_total:.2f} ({pnl_percent:.1f}%)
{sharpe}
**Understanding Your Performance:**
- Sharpe Ratio > 1.0 indicates good risk-adjusted returns
- Track win rate alongside P&L (50% win rate can still be profitable with good sizing)
- Compare returns to a passive benchmark

**Improvement Tips:**
- Review losing trades for patterns
- Assess if position sizes match conviction levels
- Consider if you're overtrading in certain categories"""

_NO_PERFORMANCE_TEXT = """I don't have enough trading data to show detailed performance metrics yet.

**What I'll Track:**
- Win/loss rate and P&L
- Risk-adjusted returns (Sharpe ratio)
- Performance by market category
- Position sizing effectiveness

Start trading to build your performance history!"""

_KALSHI_TEXT = """Kalshi is a CFTC-regulated prediction market exchange based in the US.

**Key Features:**
- First legally regulated prediction market in the US
- Contracts on economic, political, and weather events
- Binary yes/no contracts paying $0 or $1
- Real-time trading with order book model

**Popular Market Types:**
- Economic indicators (CPI, unemployment, GDP)
- Federal Reserve decisions (rate changes)
- Political outcomes
- Weather and climate events

**Trading Mechanics:**
- Contracts priced 0-99 cents (representing probability)
- Can buy Yes or No positions
- Limit and market orders available
- Positions can be closed before event resolution

**Tips for Kalshi:**
- Watch the spread between bid/ask
- Higher volume markets have better liquidity
- Economic calendar events often have predictable volume spikes

Would you like me to explain any specific Kalshi market type?"""

_GREETING_TEXT = """I'm Kalshorb, your AI advisor for prediction market trading. I'm here to help you make better-informed decisions.

**What I Can Help With:**

📊 **Market Analysis**
- Evaluate prediction market opportunities
- Understand probability pricing and edge

💼 **Portfolio Management**
- Review your positions and allocation
- Optimize for risk-adjusted returns

🎯 **Position Sizing**
- Kelly Criterion calculations
- Fractional betting strategies

📈 **Risk Assessment**
- Analyze your trading patterns
- Provide personalized risk recommendations

📚 **Education**
- Explain prediction market concepts
- Share trading strategies and best practices

What would you like to explore today?"""

RISK_EXPLANATIONS: dict[str, str] = {
    "conservative": """Your conservative approach prioritizes capital preservation. This means:
- Smaller position sizes relative to portfolio
- Focus on higher-probability trades
- Lower expected volatility in returns
- Suitable for steady, consistent growth""",
    "moderate": """Your balanced approach seeks reasonable returns with manageable risk. This means:
- Standard position sizing using Kelly fraction
- Mix of high and moderate probability trades
- Moderate portfolio volatility
- Good for most prediction market participants""",
    "aggressive": """Your aggressive approach accepts higher risk for potential higher returns. This means:
- Larger position sizes relative to bankroll
- Willingness to take lower-probability trades
- Higher expected volatility
- Requires strict discipline and risk management""",
    "speculative": """Your speculative approach maximizes risk exposure. This means:
- Maximum position sizes
- Comfort with high-variance outcomes
- Significant drawdown risk
- Only suitable for experienced traders with high risk tolerance""",
}

DEFAULT_RISK_EXPLANATION = (
    "Your risk profile helps determine appropriate position sizes and trade selection."
)


def _navigate(label: str, path: str) -> SuggestedAction:
    return SuggestedAction(label=label, action="navigate", path=path)


def risk_explanation(classification: Optional[str]) -> str:
    """Return the explanatory paragraph for a risk classification.

    Unknown or missing classifications get the default paragraph.
    """
    return RISK_EXPLANATIONS.get((classification or "").lower(), DEFAULT_RISK_EXPLANATION)


def _format_score(score: Optional[float]) -> str:
    if score is None:
        return "N/A"
    return f"{score:g}"


def _market_basics(_context: AccountContext) -> AdvisoryReply:
    return AdvisoryReply(
        message=_MARKET_BASICS_TEXT,
        confidence=92,
        suggested_actions=[
            SuggestedAction(label="Learn Trading Strategies", action="learn_strategies"),
            _navigate("Explore Markets", "/markets"),
        ],
    )


def _position_sizing(context: AccountContext) -> AdvisoryReply:
    portfolio = context.portfolio
    kelly = (portfolio and portfolio.kelly_fraction) or DEFAULT_KELLY_FRACTION
    return AdvisoryReply(
        message=_POSITION_SIZING_TEXT.format(kelly_pct=f"{kelly * 100:.0f}"),
        confidence=88,
        suggested_actions=[
            SuggestedAction(label="Calculate Position Size", action="calculate_kelly"),
            _navigate("Adjust Kelly Settings", "/settings"),
        ],
    )


def _portfolio(context: AccountContext) -> AdvisoryReply:
    positions = context.positions
    if not positions:
        return AdvisoryReply(
            message=_EMPTY_PORTFOLIO_TEXT,
            confidence=80,
            suggested_actions=[
                _navigate("Get Recommendations", "/recommendations"),
                _navigate("Browse Markets", "/markets"),
            ],
        )

    portfolio = context.portfolio
    performance = ""
    if portfolio is not None and portfolio.pnl_total:
        performance = (
            f"\n**Performance:** ${portfolio.pnl_total:.2f} "
            f"({(portfolio.pnl_percent or 0):.1f}%)\n"
        )

    message = _PORTFOLIO_TEXT.format(
        count=len(positions),
        plural="s" if len(positions) > 1 else "",
        total_value=context.total_position_value,
        performance=performance,
    )
    return AdvisoryReply(
        message=message,
        confidence=85,
        suggested_actions=[
            _navigate("View All Positions", "/portfolio"),
            SuggestedAction(label="Optimize Portfolio", action="optimize_portfolio"),
        ],
    )


def _risk(context: AccountContext) -> AdvisoryReply:
    actions = [
        _navigate("View Risk Details", "/analytics"),
        _navigate("Adjust Risk Settings", "/settings"),
    ]
    profile = context.risk_profile
    if profile is None:
        return AdvisoryReply(
            message=_NO_RISK_PROFILE_TEXT, confidence=75, suggested_actions=actions
        )

    level = profile.risk_classification or DEFAULT_RISK_CLASSIFICATION
    message = _RISK_PROFILE_TEXT.format(
        classification=level[:1].upper() + level[1:],
        score=_format_score(profile.risk_score),
        explanation=risk_explanation(level),
    )
    return AdvisoryReply(message=message, confidence=85, suggested_actions=actions)


def _recommendations(_context: AccountContext) -> AdvisoryReply:
    return AdvisoryReply(
        message=_RECOMMENDATIONS_TEXT,
        confidence=78,
        suggested_actions=[
            _navigate("View Recommendations", "/recommendations"),
            _navigate("Browse All Markets", "/markets"),
        ],
    )


def _performance(context: AccountContext) -> AdvisoryReply:
    actions = [
        _navigate("View Full Analytics", "/analytics"),
        _navigate("View Portfolio", "/portfolio"),
    ]
    portfolio = context.portfolio
    if portfolio is None or not portfolio.total_value:
        return AdvisoryReply(
            message=_NO_PERFORMANCE_TEXT, confidence=70, suggested_actions=actions
        )

    sharpe = ""
    if portfolio.sharpe_ratio:
        sharpe = f"- Sharpe Ratio: {portfolio.sharpe_ratio:.2f}\n"
    message = _PERFORMANCE_TEXT.format(
        total_value=portfolio.total_value,
        pnl_total=portfolio.pnl_total or 0,
        pnl_percent=portfolio.pnl_percent or 0,
        sharpe=sharpe,
    )
    return AdvisoryReply(message=message, confidence=88, suggested_actions=actions)


def _kalshi(_context: AccountContext) -> AdvisoryReply:
    return AdvisoryReply(
        message=_KALSHI_TEXT,
        confidence=90,
        suggested_actions=[
            _navigate("Browse Kalshi Markets", "/markets"),
            _navigate("View Recommendations", "/recommendations"),
        ],
    )


def _greeting(_context: AccountContext) -> AdvisoryReply:
    return AdvisoryReply(
        message=_GREETING_TEXT,
        confidence=85,
        suggested_actions=[
            SuggestedAction(label="Analyze My Portfolio", action="analyze_portfolio"),
            _navigate("Get Recommendations", "/recommendations"),
            SuggestedAction(label="Learn About Markets", action="learn_markets"),
        ],
    )


TEMPLATES: dict[Topic, Callable[[AccountContext], AdvisoryReply]] = {
    Topic.MARKET_BASICS: _market_basics,
    Topic.POSITION_SIZING: _position_sizing,
    Topic.PORTFOLIO: _portfolio,
    Topic.RISK: _risk,
    Topic.RECOMMENDATIONS: _recommendations,
    Topic.PERFORMANCE: _performance,
    Topic.KALSHI: _kalshi,
    Topic.GREETING: _greeting,
}


def render_reply(topic: Topic, context: Optional[AccountContext] = None) -> AdvisoryReply:
    """Render the templated reply for an already classified topic."""
    return TEMPLATES[topic](context or AccountContext())


def generate_fallback_reply(
    message: Optional[str], context: Optional[AccountContext] = None
) -> AdvisoryReply:
    """Classify a message and render the matching templated reply.

    Args:
        message: Raw user text; None is treated as an empty message.
        context: Optional account snapshot used to personalize the reply.

    Returns:
        A complete AdvisoryReply. Never raises for any message.
    """
    return render_reply(classify_intent(message), context)
