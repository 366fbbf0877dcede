"""The support group every end-user conversation is relayed to."""

from __future__ import annotations

import threading
from typing import Optional


class SupportChannel:
    """
    Process-wide support group id. Unset until configured at startup or through
    the API; while unset, user messages are stored but not relayed.
    """

    def __init__(self, chat_id: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._chat_id = self._normalize(chat_id)

    @staticmethod
    def _normalize(chat_id: Optional[str]) -> Optional[str]:
        if chat_id is None:
            return None
        chat_id = str(chat_id).strip()
        return chat_id or None

    def get(self) -> Optional[str]:
        with self._lock:
            return self._chat_id

    def set(self, chat_id: str) -> None:
        normalized = self._normalize(chat_id)
        if normalized is None:
            raise ValueError("Support group id must not be empty")
        with self._lock:
            self._chat_id = normalized

    def is_support_chat(self, chat_id: str) -> bool:
        current = self.get()
        return current is not None and current == str(chat_id)
