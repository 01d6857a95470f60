"""
Test: retry decorator and linear backoff.
"""
import pytest

from utils.retry import compute_delay, retry_on_exception


class Flaky(Exception):
    pass


class Fatal(Exception):
    pass


def test_linear_delays():
    assert [compute_delay(n, 1.0) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]


def test_reraises_last_exception_after_budget():
    sleeps = []
    calls = []

    @retry_on_exception((Flaky,), max_attempts=3, initial_delay=1.0, sleep=sleeps.append)
    def always_fails():
        calls.append(1)
        raise Flaky(f"attempt {len(calls)}")

    with pytest.raises(Flaky, match="attempt 3"):
        always_fails()
    assert len(calls) == 3
    assert sleeps == [1.0, 2.0]


def test_other_exceptions_propagate_immediately():
    sleeps = []
    calls = []

    @retry_on_exception((Flaky,), max_attempts=3, sleep=sleeps.append)
    def fails_hard():
        calls.append(1)
        raise Fatal("no retry")

    with pytest.raises(Fatal):
        fails_hard()
    assert len(calls) == 1
    assert sleeps == []


def test_returns_value_once_successful():
    outcomes = [Flaky("once"), "ok"]
    sleeps = []

    @retry_on_exception((Flaky,), max_attempts=3, sleep=sleeps.append)
    def recovers():
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    assert recovers() == "ok"
    assert sleeps == [1.0]


def test_invalid_attempt_budget():
    with pytest.raises(ValueError):
        retry_on_exception(max_attempts=0)
