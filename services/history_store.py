"""Append-only local history of generated artifacts."""

import json
import time
from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import config
from services.local_storage import KeyValueStore
from utils.logger import get_logger
from utils.error_handler import PersistenceError

logger = get_logger()


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    content: str
    feature: str
    input: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "feature": self.feature,
            "input": self.input,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            id=str(data["id"]),
            content=data.get("content", ""),
            feature=data.get("feature", ""),
            input=data.get("input", ""),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


def truncate_input(text: str, limit: int = config.INPUT_PREVIEW_LENGTH) -> str:
    """Keeps the first `limit` characters, marking the cut with an ellipsis."""
    return text[:limit] + ("..." if len(text) > limit else "")


class HistoryStore:
    """Repository for history entries, stored newest first in one storage slot.

    Every mutation is a read-modify-write of the whole list with no locking.
    Two sessions writing at once race and the last writer wins.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        slot: str = config.HISTORY_SLOT,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.slot = slot
        self.clock = clock

    def load(self) -> List[HistoryEntry]:
        """Reads the stored list. Unreadable or corrupt data reads as empty."""
        try:
            raw = self.storage.get(self.slot)
        except PersistenceError as e:
            logger.error(f"Error loading history: {e}")
            return []
        if not raw:
            return []
        try:
            return [HistoryEntry.from_dict(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Error loading history, treating it as empty: {e}")
            return []

    def save_all(self, entries: List[HistoryEntry]) -> None:
        """Replaces the stored list in a single write.

        Raises:
            PersistenceError: If the storage write fails.
        """
        blob = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False)
        try:
            self.storage.set(self.slot, blob)
        except PersistenceError as e:
            logger.error(f"Failed to write history ({len(entries)} entries): {e}")
            raise

    def _new_id(self, existing: List[HistoryEntry]) -> str:
        taken = {entry.id for entry in existing}
        candidate = int(self.clock() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def save(self, content: str, feature: str, input: str, timestamp: Optional[datetime] = None) -> HistoryEntry:
        """Prepends a new entry and returns it. The input is kept as a short preview (see truncate_input)."""
        existing = self.load()
        entry = HistoryEntry(
            id=self._new_id(existing),
            content=content,
            feature=feature,
            input=truncate_input(input),
            timestamp=timestamp or datetime.now(),
        )
        self.save_all([entry] + existing)
        logger.info(f"Saved history entry {entry.id} for '{feature}'.")
        return entry

    def list(self) -> List[HistoryEntry]:
        return self.load()

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        return next((entry for entry in self.load() if entry.id == entry_id), None)

    def delete_by_id(self, entry_id: str) -> bool:
        """Removes one entry. Returns False when the id was not present."""
        entries = self.load()
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            logger.warning(f"History entry {entry_id} not found; nothing deleted.")
            return False
        self.save_all(remaining)
        logger.info(f"Deleted history entry {entry_id}.")
        return True

    def clear_all(self) -> None:
        try:
            self.storage.delete(self.slot)
        except PersistenceError as e:
            logger.error(f"Failed to clear history: {e}")
            raise
        logger.info("Cleared history.")

    def rename_feature(self, entry_id: str, new_label: str) -> bool:
        """Overwrites one entry's feature label. Returns False when the id was not present."""
        entries = self.load()
        found = False
        updated = []
        for entry in entries:
            if entry.id == entry_id:
                entry = replace(entry, feature=new_label)
                found = True
            updated.append(entry)
        if not found:
            logger.warning(f"History entry {entry_id} not found; nothing renamed.")
            return False
        self.save_all(updated)
        logger.info(f"Renamed history entry {entry_id} to '{new_label}'.")
        return True

    def search(self, term: str = "", feature: Optional[str] = None) -> List[HistoryEntry]:
        """Entries whose content or feature contains `term` (case-insensitive), optionally of one feature."""
        needle = term.lower()
        return [
            entry for entry in self.load()
            if (needle in entry.content.lower() or needle in entry.feature.lower())
            and (not feature or entry.feature == feature)
        ]

    def features(self) -> List[str]:
        """Distinct feature labels, in first-seen order."""
        return list(dict.fromkeys(entry.feature for entry in self.load()))

    def stats(self) -> Dict[str, Any]:
        entries = self.load()
        counts = Counter(entry.feature for entry in entries)
        return {
            "total_generations": len(entries),
            "features_used": len(counts),
            "last_activity": entries[0].timestamp if entries else None,
            "most_used_feature": counts.most_common(1)[0][0] if counts else "None",
        }
