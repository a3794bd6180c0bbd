from __future__ import annotations

import threading
import time

from src.checkin_system.checkin_system.location.chain import Provider, ProviderChain


class StubProvider(Provider):
    def __init__(self, name, *, result=None, error=None, block: threading.Event | None = None, timeout_seconds=None):
        self.name = name
        self.result = result
        self.error = error
        self.block = block
        self.timeout_seconds = timeout_seconds
        self.calls = 0

    def attempt(self, query):
        self.calls += 1
        if self.block is not None:
            self.block.wait(5)
        if self.error:
            raise self.error
        return self.result


def test_first_provider_failure_falls_through_to_second():
    first = StubProvider("first", error=RuntimeError("boom"))
    second = StubProvider("second", result="label")
    chain = ProviderChain([first, second], timeout_seconds=1)

    assert chain.resolve("q") == "label"
    assert (first.calls, second.calls) == (1, 1)


def test_stops_at_first_success():
    first = StubProvider("first", result="a")
    second = StubProvider("second", result="b")

    assert ProviderChain([first, second]).resolve("q") == "a"
    assert second.calls == 0


def test_opt_out_moves_on():
    chain = ProviderChain([StubProvider("no-key", result=None), StubProvider("ok", result="b")])

    assert chain.resolve("q") == "b"


def test_all_failing_returns_none():
    chain = ProviderChain(
        [StubProvider("a", error=ValueError("bad")), StubProvider("b", result=None), StubProvider("c", error=OSError())]
    )

    assert chain.resolve("q") is None


def test_empty_chain_returns_none():
    assert ProviderChain([]).resolve("q") is None


def test_hung_provider_is_abandoned_after_its_timeout():
    release = threading.Event()
    slow = StubProvider("slow", result="late", block=release, timeout_seconds=0.2)
    fast = StubProvider("fast", result="fast")
    chain = ProviderChain([slow, fast], timeout_seconds=5)

    started = time.monotonic()
    try:
        assert chain.resolve("q") == "fast"
        assert time.monotonic() - started < 2
    finally:
        release.set()


def test_failures_are_logged(caplog):
    chain = ProviderChain([StubProvider("broken", error=RuntimeError("boom"))], name="reverse-geocode")

    with caplog.at_level("WARNING"):
        chain.resolve("q")

    assert "broken" in caplog.text
    assert "boom" in caplog.text


def test_many_hung_attempts_do_not_starve_the_fallback():
    release = threading.Event()
    slow = StubProvider("slow", result="late", block=release)
    fast = StubProvider("fast", result="fast")
    chain = ProviderChain([slow, fast], timeout_seconds=0.2)

    try:
        results = [chain.resolve("q") for _ in range(6)]
    finally:
        release.set()

    assert results == ["fast"] * 6
    assert fast.calls == 6


def test_concurrent_resolves_each_reach_the_fallback():
    release = threading.Event()
    chain = ProviderChain(
        [StubProvider("slow", result="late", block=release), StubProvider("fast", result="fast")],
        timeout_seconds=0.3,
    )
    results = []

    def worker():
        results.append(chain.resolve("q"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    try:
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)
    finally:
        release.set()

    assert results == ["fast"] * 8
