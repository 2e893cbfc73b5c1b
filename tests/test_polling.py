"""Tests for the polling primitives."""

import asyncio

import pytest

from eth_clients.beacon.polling import poll_until, resolve_all, retry_until_ready
from eth_clients.exceptions import NotFoundError, NotReadyError, PollTimeoutError

INTERVAL = 0.01


class Sequence:
    """Async callable returning (or raising) scripted outcomes, then repeating the last."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class TestPollUntil:
    def test_returns_first_result(self):
        query = Sequence(None, None, "ready")
        result = asyncio.run(poll_until(query, INTERVAL, timeout=5))
        assert result == "ready"
        assert query.calls == 3

    def test_falsy_results_count(self):
        query = Sequence(None, 0)
        assert asyncio.run(poll_until(query, INTERVAL, timeout=5)) == 0

    def test_retry_on_means_not_yet(self):
        query = Sequence(NotFoundError("block"), NotReadyError("x"), "ready")
        result = asyncio.run(poll_until(query, INTERVAL, timeout=5, retry_on=(NotReadyError,)))
        assert result == "ready"
        assert query.calls == 3

    def test_other_errors_propagate_immediately(self):
        query = Sequence(ValueError("boom"), "ready")
        with pytest.raises(ValueError):
            asyncio.run(poll_until(query, INTERVAL, timeout=5, retry_on=(NotReadyError,)))
        assert query.calls == 1

    def test_timeout(self):
        query = Sequence(None)
        with pytest.raises(PollTimeoutError) as excinfo:
            asyncio.run(poll_until(query, INTERVAL, timeout=0.1, what="nothing"))
        assert excinfo.value.what == "nothing"
        assert query.calls >= 1

    def test_first_query_waits_one_interval(self):
        query = Sequence("ready")
        with pytest.raises(PollTimeoutError):
            asyncio.run(poll_until(query, 1.0, timeout=0.05))
        assert query.calls == 0

    def test_timeout_error_from_query_is_not_a_deadline(self):
        query = Sequence(TimeoutError("request timed out"))
        with pytest.raises(TimeoutError) as excinfo:
            asyncio.run(poll_until(query, INTERVAL, timeout=5))
        assert not isinstance(excinfo.value, PollTimeoutError)

    def test_cancellation_stops_ticks(self):
        query = Sequence(None)

        async def run():
            task = asyncio.create_task(poll_until(query, INTERVAL))
            await asyncio.sleep(INTERVAL * 5)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            calls = query.calls
            await asyncio.sleep(INTERVAL * 5)
            return calls

        calls_at_cancel = asyncio.run(run())
        assert query.calls == calls_at_cancel


class TestResolveAll:
    def test_results_in_order(self):
        async def value(v, delay):
            await asyncio.sleep(delay)
            return v

        results = asyncio.run(resolve_all(value("a", 0.03), value("b", 0.0), timeout=5))
        assert results == ["a", "b"]

    def test_no_tasks(self):
        assert asyncio.run(resolve_all(timeout=1)) == []

    def test_first_error_in_task_order(self):
        finished = []

        async def fail(exc, delay):
            await asyncio.sleep(delay)
            finished.append(type(exc))
            raise exc

        with pytest.raises(ValueError):
            asyncio.run(resolve_all(fail(ValueError(), 0.03), fail(KeyError(), 0.0), timeout=5))
        assert finished == [KeyError, ValueError]

    def test_waits_for_all_before_raising(self):
        finished = []

        async def fail():
            raise ValueError()

        async def slow():
            await asyncio.sleep(0.03)
            finished.append("slow")
            return 1

        with pytest.raises(ValueError):
            asyncio.run(resolve_all(fail(), slow(), timeout=5))
        assert finished == ["slow"]

    def test_timeout_cancels_pending(self):
        cancelled = []

        async def forever():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        async def quick():
            return 1

        with pytest.raises(PollTimeoutError):
            asyncio.run(resolve_all(quick(), forever(), timeout=0.05))
        assert cancelled == [True]


class TestRetryUntilReady:
    def test_retries_until_value(self):
        request = Sequence(NotFoundError("spec"), None, ConnectionResetError(), "spec")

        async def run():
            return await retry_until_ready(
                request, INTERVAL, retry_on=(NotReadyError, ConnectionResetError)
            )

        assert asyncio.run(run()) == "spec"
        assert request.calls == 4

    def test_default_retries_transport_errors(self):
        import aiohttp

        request = Sequence(aiohttp.ClientConnectionError(), "genesis")
        assert asyncio.run(retry_until_ready(request, INTERVAL)) == "genesis"

    def test_other_errors_propagate(self):
        request = Sequence(KeyError("data"), "spec")
        with pytest.raises(KeyError):
            asyncio.run(retry_until_ready(request, INTERVAL))
        assert request.calls == 1
