"""
Test: usage counters and the rolling daily window.
"""
import json
from datetime import date, timedelta

import pytest

import config
from services.local_storage import InMemoryStorage
from services.usage_tracker import UsageCounters, UsageTracker

START = date(2026, 2, 20)


def test_daily_usage_keeps_last_seven_days(storage):
    tracker = UsageTracker(storage)
    for offset in range(10):
        tracker.increment(today=START + timedelta(days=offset))

    counters = tracker.load()
    dates = [item["date"] for item in counters.daily_usage]
    assert len(dates) == 7
    assert dates == [(START + timedelta(days=offset)).isoformat() for offset in range(3, 10)]
    assert counters.total_calls == 10


def test_same_day_updates_in_place(storage):
    tracker = UsageTracker(storage)
    tracker.increment(today=START)
    counters = tracker.increment(today=START)

    assert counters.daily_usage == [{"date": START.isoformat(), "calls": 2}]
    assert counters.total_calls == 2
    assert counters.today_calls == 2


def test_out_of_order_day_is_sorted(storage):
    tracker = UsageTracker(storage)
    tracker.increment(today=START + timedelta(days=1))
    counters = tracker.increment(today=START)
    assert [item["date"] for item in counters.daily_usage] == [
        START.isoformat(), (START + timedelta(days=1)).isoformat(),
    ]


def test_persisted_in_usage_slot(storage):
    UsageTracker(storage).increment(today=START)
    stored = json.loads(storage.slots[config.USAGE_SLOT])
    assert stored["total_calls"] == 1
    assert stored["daily_usage"] == [{"date": START.isoformat(), "calls": 1}]


@pytest.mark.parametrize("blob", [
    "not json",
    json.dumps({"bogus": 1}),
    json.dumps([1, 2]),
    json.dumps({"daily_usage": [{"calls": 2}]}),
    json.dumps({"daily_usage": ["2026-02-20"]}),
    json.dumps({"daily_usage": 5}),
    json.dumps({"total_calls": "many"}),
])
def test_corrupt_data_reads_as_zero(blob):
    tracker = UsageTracker(InMemoryStorage({config.USAGE_SLOT: blob}))
    assert tracker.load() == UsageCounters()


def test_missing_slot_reads_as_zero(storage):
    assert UsageTracker(storage).load() == UsageCounters()


def test_increment_recovers_from_malformed_day_entry():
    storage = InMemoryStorage({config.USAGE_SLOT: json.dumps({"total_calls": 4, "daily_usage": [{"calls": 2}]})})
    counters = UsageTracker(storage).increment(today=START)

    assert counters.total_calls == 1
    assert counters.daily_usage == [{"date": START.isoformat(), "calls": 1}]
