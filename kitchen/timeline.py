"""
Cooking log: append-only record of narrations and action attempts.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .catalog import ERROR_INGREDIENT, Ingredient

logger = logging.getLogger(__name__)


@dataclass
class TimelineEntry:
    """Either a free-text narration or an action attempt.

    For attempts, ``result`` stays None while the combination is in flight.
    """
    id: str
    timestamp: datetime = field(default_factory=datetime.now)
    text: Optional[str] = None
    action: Optional[str] = None
    ingredients: Optional[List[str]] = None
    result: Optional[Ingredient] = None

    @property
    def is_attempt(self) -> bool:
        return self.action is not None

    @property
    def is_pending(self) -> bool:
        return self.is_attempt and self.result is None

    @property
    def is_error(self) -> bool:
        return self.result == ERROR_INGREDIENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "text": self.text,
            "action": self.action,
            "ingredients": list(self.ingredients) if self.ingredients is not None else None,
            "result": self.result.to_dict() if self.result else None,
            "pending": self.is_pending,
        }


class Timeline:
    """Append-only log. The only mutation is filling in an attempt's result once."""

    def __init__(self):
        self._entries: List[TimelineEntry] = []
        self._lock = threading.Lock()

    def _append(self, entry: TimelineEntry) -> TimelineEntry:
        with self._lock:
            self._entries.append(entry)
        return entry

    def narrate(self, text: str) -> TimelineEntry:
        """Append a text-only entry."""
        logger.info(f"Timeline: {text}")
        return self._append(TimelineEntry(id=f"text-{uuid.uuid4().hex}", text=text))

    def has_narration(self, text: str) -> bool:
        with self._lock:
            return any(e.text == text and not e.is_attempt for e in self._entries)

    def start_attempt(
        self,
        action: str,
        ingredients: List[str],
        text: Optional[str] = None
    ) -> TimelineEntry:
        """Append a pending action attempt."""
        entry = TimelineEntry(
            id=f"cooking-{uuid.uuid4().hex}",
            text=text,
            action=action,
            ingredients=list(ingredients),
        )
        logger.info(f"Timeline: {action}({', '.join(ingredients)}) started")
        return self._append(entry)

    def resolve(self, entry_id: str, result: Ingredient) -> bool:
        """Fill in the result of a pending attempt. Returns False if not pending."""
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    if not entry.is_pending:
                        return False
                    entry.result = result
                    return True
        return False

    def fail(self, entry_id: str) -> bool:
        return self.resolve(entry_id, ERROR_INGREDIENT)

    def get(self, entry_id: str) -> Optional[TimelineEntry]:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
        return None

    def entries(self) -> List[TimelineEntry]:
        with self._lock:
            return list(self._entries)

    def pending(self) -> List[TimelineEntry]:
        with self._lock:
            return [e for e in self._entries if e.is_pending]

    def __len__(self) -> int:
        return len(self._entries)
