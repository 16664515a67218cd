"""
Port interfaces (ABCs) for the advisor bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from kalshorb.domain.advisor.entities import (
    AccountContext,
    ChatMessageRecord,
    ConversationTurn,
)


class MessageStore(ABC):
    """Port for persisting and reading chat turns."""

    @abstractmethod
    async def save(self, record: ChatMessageRecord) -> None:
        """Persist a single chat turn.

        Raises:
            PersistenceError: If the datastore rejects the write.
        """
        raise NotImplementedError

    @abstractmethod
    async def recent_history(
        self, session_id: str, limit: int
    ) -> list[ConversationTurn]:
        """Return the last ``limit`` turns of a session, oldest first."""
        raise NotImplementedError


class SessionStore(ABC):
    """Port for conversation session metadata."""

    @abstractmethod
    async def exists(self, session_id: str) -> bool:
        """Return True if a session record with this id exists."""
        raise NotImplementedError

    @abstractmethod
    async def create(self, session_id: str, user_id: str, title: str) -> None:
        """Create a new session record."""
        raise NotImplementedError

    @abstractmethod
    async def touch(self, session_id: str, summary: str) -> None:
        """Update the session summary and activity timestamps."""
        raise NotImplementedError


class AccountContextReader(ABC):
    """Port for reading the user's positions, risk profile and portfolio."""

    @abstractmethod
    async def fetch(self, user_id: str) -> AccountContext:
        """Return the account snapshot for a user.

        Implementations must degrade each part independently: a failed
        sub-fetch yields an empty value instead of failing the whole call.
        """
        raise NotImplementedError


class ChatCompletionPort(ABC):
    """Port for an upstream chat-completion language model."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Return True if the upstream model is configured for use."""
        raise NotImplementedError

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        turns: list[ConversationTurn],
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
    ) -> str:
        """Return the model's reply text for a conversation.

        Raises:
            UpstreamCompletionError: On transport errors, non-2xx
                responses, timeouts, or a missing API key.
        """
        raise NotImplementedError
