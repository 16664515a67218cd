"""
Adapter: Chat message persistence.

Implements the MessageStore port on the ``chat_messages`` table.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from kalshorb.domain.advisor.entities import (
    ChatMessageRecord,
    ConversationTurn,
    Role,
    SuggestedAction,
)
from kalshorb.domain.advisor.ports import MessageStore
from kalshorb.infrastructure.advisor.rest_client import RestDatastoreClient

TABLE = "chat_messages"


def action_to_dict(action: SuggestedAction) -> dict[str, Any]:
    """Serialize a SuggestedAction, leaving out unset fields."""
    return {k: v for k, v in asdict(action).items() if v is not None}


def _to_turn(row: dict[str, Any]) -> ConversationTurn:
    role = Role.ASSISTANT if row.get("role") == Role.ASSISTANT.value else Role.USER
    return ConversationTurn(role=role, content=str(row.get("content") or ""))


class MessageRepositoryAdapter(MessageStore):
    """Concrete adapter for chat turns stored in the REST datastore."""

    def __init__(self, client: RestDatastoreClient) -> None:
        self._client = client

    async def save(self, record: ChatMessageRecord) -> None:
        """Insert a chat turn, stamped with the current UTC time.

        Args:
            record: The turn to persist. Unset optional fields are omitted.
        """
        row: dict[str, Any] = {
            "user_id": record.user_id,
            "session_id": record.session_id,
            "role": record.role.value,
            "content": record.content,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        if record.confidence_score is not None:
            row["confidence_score"] = record.confidence_score
        if record.suggested_actions is not None:
            row["suggested_actions"] = [
                action_to_dict(a) for a in record.suggested_actions
            ]
        if record.market_context is not None:
            row["market_context"] = record.market_context
        await self._client.insert(TABLE, row)

    async def recent_history(
        self, session_id: str, limit: int
    ) -> list[ConversationTurn]:
        """Return the latest ``limit`` turns of a session in chronological order.

        Args:
            session_id: Conversation id.
            limit: Maximum number of turns.

        Returns:
            Turns oldest first. A non-list payload yields an empty list.
        """
        rows = await self._client.select(
            TABLE,
            {
                "session_id": f"eq.{session_id}",
                "order": "created_at.desc",
                "limit": limit,
            },
        )
        if not isinstance(rows, list):
            return []
        return [_to_turn(row) for row in reversed(rows) if isinstance(row, dict)]
