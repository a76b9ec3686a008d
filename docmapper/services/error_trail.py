# ==============================================
# docmapper/services/error_trail.py
# ==============================================
from typing import List, Optional

SEPARATOR = "; "
ELLIPSIS = "..."


def truncate_message(message: Optional[str], max_length: int = 1000) -> Optional[str]:
    """
    Bound a message to max_length characters, marking the cut with '...'
    """
    if message is None or len(message) <= max_length:
        return message
    return message[:max_length - len(ELLIPSIS)] + ELLIPSIS


class ErrorTrail:
    """Human-readable error history of one processing attempt."""

    def __init__(self, max_length: int = 1000):
        self.max_length = max_length
        self.entries: List[str] = []

    def add(self, message: Optional[str]) -> None:
        if message and message.strip():
            self.entries.append(message.strip())

    def render(self) -> Optional[str]:
        if not self.entries:
            return None
        return truncate_message(SEPARATOR.join(self.entries), self.max_length)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
