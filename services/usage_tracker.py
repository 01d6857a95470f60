"""Usage counters for successful completions."""

import json
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Dict, List, Optional

import config
from services.local_storage import KeyValueStore
from utils.logger import get_logger
from utils.error_handler import PersistenceError

logger = get_logger()


@dataclass
class UsageCounters:
    total_calls: int = 0
    today_calls: int = 0
    this_week_calls: int = 0
    this_month_calls: int = 0
    # [{"date": "YYYY-MM-DD", "calls": n}], ascending by date
    daily_usage: List[Dict[str, object]] = field(default_factory=list)


class UsageTracker:
    """Loads and increments the counters stored in one storage slot.

    Like the history, updates are whole-blob read-modify-write without locking.
    """

    def __init__(self, storage: KeyValueStore, slot: str = config.USAGE_SLOT, days_kept: int = config.USAGE_DAYS_KEPT):
        self.storage = storage
        self.slot = slot
        self.days_kept = days_kept

    def load(self) -> UsageCounters:
        try:
            raw = self.storage.get(self.slot)
        except PersistenceError as e:
            logger.error(f"Error loading usage data: {e}")
            return UsageCounters()
        if not raw:
            return UsageCounters()
        try:
            counters = UsageCounters(**json.loads(raw))
            for name in ("total_calls", "today_calls", "this_week_calls", "this_month_calls"):
                setattr(counters, name, int(getattr(counters, name)))
            counters.daily_usage = [
                {"date": str(item["date"]), "calls": int(item["calls"])} for item in counters.daily_usage
            ]
            return counters
        except (ValueError, TypeError, KeyError) as e:
            logger.error(f"Error loading usage data, starting from zero: {e}")
            return UsageCounters()

    def increment(self, today: Optional[date] = None) -> UsageCounters:
        """Records one successful completion and persists the result.

        Raises:
            PersistenceError: If the storage write fails.
        """
        counters = self.load()
        day = (today or date.today()).isoformat()

        counters.total_calls += 1
        counters.today_calls += 1
        counters.this_week_calls += 1
        counters.this_month_calls += 1

        entry = next((item for item in counters.daily_usage if item["date"] == day), None)
        if entry is not None:
            entry["calls"] += 1
        else:
            counters.daily_usage.append({"date": day, "calls": 1})
        counters.daily_usage.sort(key=lambda item: item["date"])
        counters.daily_usage = counters.daily_usage[-self.days_kept:]

        try:
            self.storage.set(self.slot, json.dumps(asdict(counters)))
        except PersistenceError as e:
            logger.error(f"Failed to write usage data: {e}")
            raise
        logger.debug(f"Usage incremented: total={counters.total_calls} today={day}")
        return counters
