"""
Adapter: Conversation session persistence.

Implements the SessionStore port on the ``conversation_sessions`` table.
"""

from datetime import datetime, timezone

from kalshorb.domain.advisor.ports import SessionStore
from kalshorb.infrastructure.advisor.rest_client import RestDatastoreClient

TABLE = "conversation_sessions"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SessionRepositoryAdapter(SessionStore):
    """Concrete adapter for session metadata in the REST datastore."""

    def __init__(self, client: RestDatastoreClient) -> None:
        self._client = client

    async def exists(self, session_id: str) -> bool:
        rows = await self._client.select(TABLE, {"id": f"eq.{session_id}"})
        return isinstance(rows, list) and len(rows) > 0

    async def create(self, session_id: str, user_id: str, title: str) -> None:
        now = _now()
        await self._client.insert(
            TABLE,
            {
                "id": session_id,
                "user_id": user_id,
                "title": title,
                "message_count": 1,
                "is_archived": False,
                "created_at": now,
                "updated_at": now,
            },
        )

    async def touch(self, session_id: str, summary: str) -> None:
        now = _now()
        await self._client.update(
            TABLE,
            {"id": f"eq.{session_id}"},
            {"summary": summary, "updated_at": now, "last_message_at": now},
        )
