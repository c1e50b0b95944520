"""In-app notification list shown alongside platform notifications."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tick_pet.types import Category

DEFAULT_MAX_AGE_MS = 300_000


@dataclass
class AppNotification:
    id: str
    category: Category
    title: str
    message: str
    timestamp: int
    read: bool = False


class NotificationInbox:
    """Newest-first list of notifications with read tracking.

    Entries older than ``max_age_ms`` are dropped by ``prune()`` whether
    or not they were read.
    """

    def __init__(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> None:
        self._max_age = max_age_ms
        self._items: list[AppNotification] = []
        self._seq = 0

    def add(self, category: Category, title: str, message: str,
            now_ms: int) -> AppNotification:
        self._seq += 1
        note = AppNotification(
            id=f"{category.value}-{now_ms}-{self._seq}",
            category=category,
            title=title,
            message=message,
            timestamp=now_ms,
        )
        self._items.insert(0, note)
        return note

    def get(self, note_id: str) -> AppNotification | None:
        for note in self._items:
            if note.id == note_id:
                return note
        return None

    def dismiss(self, note_id: str) -> bool:
        for i, note in enumerate(self._items):
            if note.id == note_id:
                del self._items[i]
                return True
        return False

    def mark_read(self, note_id: str) -> bool:
        note = self.get(note_id)
        if note is None or note.read:
            return False
        note.read = True
        return True

    def mark_all_read(self) -> None:
        for note in self._items:
            note.read = True

    def clear(self) -> None:
        self._items.clear()

    def prune(self, now_ms: int) -> int:
        """Drop expired entries. Returns how many were removed."""
        before = len(self._items)
        self._items = [n for n in self._items if now_ms - n.timestamp < self._max_age]
        return before - len(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def items(self, category: Category | None = None) -> list[AppNotification]:
        if category is None:
            return list(self._items)
        return [n for n in self._items if n.category is category]

    def snapshot(self) -> list[dict[str, Any]]:
        return [
            {"id": n.id, "category": n.category.value, "title": n.title,
             "message": n.message, "timestamp": n.timestamp, "read": n.read}
            for n in self._items
        ]

    def __len__(self) -> int:
        return len(self._items)
