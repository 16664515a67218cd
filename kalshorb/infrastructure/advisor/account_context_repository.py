"""
Adapter: Account context reader.

Implements the AccountContextReader port. Positions, the current risk
assessment and the active portfolio are fetched concurrently; each
fetch degrades to an empty value on its own so one failing table
never drops the other two.
"""

import asyncio
import logging
from typing import Any, Optional

from kalshorb.domain.advisor.entities import (
    AccountContext,
    Portfolio,
    Position,
    RiskAssessment,
)
from kalshorb.domain.advisor.errors import PersistenceError
from kalshorb.domain.advisor.ports import AccountContextReader
from kalshorb.infrastructure.advisor.rest_client import RestDatastoreClient

logger = logging.getLogger(__name__)

DEFAULT_POSITION_LIMIT = 5


def _number(value: Any) -> Optional[float]:
    """Coerce a numeric column (number or numeric string) to float."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_position(row: dict[str, Any]) -> Position:
    return Position(
        quantity=_number(row.get("quantity")) or 0.0,
        avg_price=_number(row.get("avg_price")) or 0.0,
        market_ticker=row.get("market_ticker"),
        side=row.get("side"),
    )


def _to_risk(row: dict[str, Any]) -> RiskAssessment:
    classification = row.get("risk_classification")
    return RiskAssessment(
        risk_score=_number(row.get("risk_score")),
        risk_classification=str(classification) if classification else None,
    )


def _to_portfolio(row: dict[str, Any]) -> Portfolio:
    return Portfolio(
        total_value=_number(row.get("total_value")),
        pnl_total=_number(row.get("pnl_total")),
        pnl_percent=_number(row.get("pnl_percent")),
        sharpe_ratio=_number(row.get("sharpe_ratio")),
        kelly_fraction=_number(row.get("kelly_fraction")),
    )


class AccountContextRepositoryAdapter(AccountContextReader):
    """Concrete adapter reading account data from the REST datastore."""

    def __init__(
        self,
        client: RestDatastoreClient,
        position_limit: int = DEFAULT_POSITION_LIMIT,
    ) -> None:
        self._client = client
        self._position_limit = position_limit

    async def fetch(self, user_id: str) -> AccountContext:
        """Return the user's open positions, risk profile and portfolio.

        Args:
            user_id: Id of the user.

        Returns:
            AccountContext with empty values for any part that failed.
        """
        user_filter = f"eq.{user_id}"
        positions, risks, portfolios = await asyncio.gather(
            self._rows(
                "positions",
                {"user_id": user_filter, "status": "eq.open", "limit": self._position_limit},
            ),
            self._rows(
                "risk_assessments",
                {"user_id": user_filter, "is_current": "eq.true", "limit": 1},
            ),
            self._rows(
                "portfolios",
                {"user_id": user_filter, "is_active": "eq.true", "limit": 1},
            ),
        )
        return AccountContext(
            positions=tuple(_to_position(row) for row in positions),
            risk_profile=_to_risk(risks[0]) if risks else None,
            portfolio=_to_portfolio(portfolios[0]) if portfolios else None,
        )

    async def _rows(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        try:
            rows = await self._client.select(table, params)
        except PersistenceError as exc:
            logger.warning("Context fetch from %s failed: %s", table, exc.reason)
            return []
        if not isinstance(rows, list):
            return []
        return [row for row in rows if isinstance(row, dict)]
