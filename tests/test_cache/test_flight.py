"""Tests for per-key call coalescing."""

import threading
import time

import pytest

from any2db.cache.flight import SingleFlight


def _wait_for_waiters(flight, key, count):
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        with flight._lock:
            call = flight._calls.get(key)
            if call is not None and call.waiters >= count:
                return
        time.sleep(0.01)
    raise AssertionError("waiters never joined")


class TestSingleFlight:
    def test_single_caller(self):
        flight = SingleFlight()
        assert flight.do("k", lambda: 42) == (42, False)
        assert flight.in_flight() == 0

    def test_sequential_calls_run_again(self):
        flight = SingleFlight()
        calls = []
        flight.do("k", lambda: calls.append(1))
        flight.do("k", lambda: calls.append(1))
        assert len(calls) == 2

    def test_concurrent_callers_share_result(self):
        flight = SingleFlight()
        started = threading.Event()
        release = threading.Event()
        runs = []
        results = []

        def work():
            runs.append(1)
            started.set()
            release.wait(timeout=5)
            return "value"

        def call():
            results.append(flight.do("k", work))

        threads = [threading.Thread(target=call) for _ in range(4)]
        threads[0].start()
        assert started.wait(timeout=5)
        for t in threads[1:]:
            t.start()
        _wait_for_waiters(flight, "k", 3)
        release.set()
        for t in threads:
            t.join(timeout=5)

        assert runs == [1]
        assert sorted(results, key=lambda r: r[1]) == [
            ("value", False),
            ("value", True),
            ("value", True),
            ("value", True),
        ]

    def test_error_propagates_to_waiters(self):
        flight = SingleFlight()
        started = threading.Event()
        release = threading.Event()
        errors = []

        def work():
            started.set()
            release.wait(timeout=5)
            raise RuntimeError("boom")

        def call():
            try:
                flight.do("k", work)
            except RuntimeError as e:
                errors.append(str(e))

        leader = threading.Thread(target=call)
        leader.start()
        assert started.wait(timeout=5)
        follower = threading.Thread(target=call)
        follower.start()
        _wait_for_waiters(flight, "k", 1)
        release.set()
        leader.join(timeout=5)
        follower.join(timeout=5)

        assert errors == ["boom", "boom"]
        assert flight.in_flight() == 0

    def test_error_does_not_stick(self):
        flight = SingleFlight()
        with pytest.raises(ValueError):
            flight.do("k", lambda: (_ for _ in ()).throw(ValueError("x")))
        assert flight.do("k", lambda: 1) == (1, False)

    def test_distinct_keys_do_not_wait(self):
        flight = SingleFlight()
        assert flight.do("a", lambda: flight.do("b", lambda: "inner")) == (("inner", False), False)
