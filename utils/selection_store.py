"""
Per-user store for in-progress /search_ads selections.

Every method is synchronous and never awaits, so each call runs to completion
on the event loop without interleaving with other handlers.
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Optional


class MediaType(str, Enum):
    ALL = "ALL"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class AdStatus(str, Enum):
    ALL = "ALL"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ChoiceField(str, Enum):
    MEDIA_TYPE = "media_type"
    AD_STATUS = "ad_status"


_FIELD_TYPES = {
    ChoiceField.MEDIA_TYPE: MediaType,
    ChoiceField.AD_STATUS: AdStatus,
}


@dataclass(frozen=True)
class PendingSelection:
    user_id: int
    search_query: str
    media_type: Optional[MediaType] = None
    ad_status: Optional[AdStatus] = None
    created_at: float = 0.0
    updated_at: float = 0.0

    @property
    def is_complete(self) -> bool:
        return self.media_type is not None and self.ad_status is not None


@dataclass(frozen=True)
class ChoiceOutcome:
    selection: PendingSelection
    completed: bool


@dataclass
class SelectionStore:
    """Maps user id -> PendingSelection with idle-time expiry."""

    ttl: float = 900
    clock: Callable[[], float] = time.monotonic
    _entries: Dict[int, PendingSelection] = field(default_factory=dict)

    def start(self, user_id: int, search_query: str) -> PendingSelection:
        """Open a new selection for the user, replacing any earlier one."""
        self.purge_expired()
        now = self.clock()
        selection = PendingSelection(
            user_id=user_id,
            search_query=search_query,
            created_at=now,
            updated_at=now,
        )
        self._entries[user_id] = selection
        return selection

    def get(self, user_id: int) -> Optional[PendingSelection]:
        selection = self._entries.get(user_id)
        if selection is None:
            return None
        if self._is_expired(selection):
            del self._entries[user_id]
            return None
        return selection

    def apply_choice(self, user_id: int, choice: ChoiceField, value: str) -> Optional[ChoiceOutcome]:
        """
        Record one select-menu choice.

        Returns None when the user has no live selection. When the choice
        completes the selection, the entry is removed here, so only one
        caller ever sees ``completed=True`` for it.

        Raises:
            ValueError: if ``value`` is not a valid option for ``choice``.
        """
        parsed = _FIELD_TYPES[choice](value)
        current = self.get(user_id)
        if current is None:
            return None

        updated = replace(current, **{choice.value: parsed}, updated_at=self.clock())
        if updated.is_complete:
            del self._entries[user_id]
            return ChoiceOutcome(updated, True)

        self._entries[user_id] = updated
        return ChoiceOutcome(updated, False)

    def discard(self, user_id: int) -> bool:
        return self._entries.pop(user_id, None) is not None

    def purge_expired(self) -> int:
        expired = [uid for uid, sel in self._entries.items() if self._is_expired(sel)]
        for uid in expired:
            del self._entries[uid]
        return len(expired)

    def _is_expired(self, selection: PendingSelection) -> bool:
        return self.ttl is not None and self.clock() - selection.updated_at > self.ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, user_id) -> bool:
        return self.get(user_id) is not None
