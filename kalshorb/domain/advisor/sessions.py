"""
Conversation session metadata rules.
"""

TITLE_MAX_LENGTH = 50
SUMMARY_MAX_LENGTH = 100
_ELLIPSIS = "..."


def session_title(first_message: str) -> str:
    """Return a session title of at most 50 characters, ellipsized if cut."""
    if len(first_message) > TITLE_MAX_LENGTH:
        return first_message[: TITLE_MAX_LENGTH - len(_ELLIPSIS)] + _ELLIPSIS
    return first_message


def session_summary(last_message: str) -> str:
    """Return the first 100 characters of the latest user message."""
    return last_message[:SUMMARY_MAX_LENGTH]
