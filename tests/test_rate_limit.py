"""Tests for the min-interval gate, retry policy and error classification."""
import httpx
import pytest

from chartwise.ai.rate_limit import MinIntervalGate, RetryPolicy, classify_llm_error
from chartwise.domain.exceptions import (
    AIAuthenticationError,
    AIRateLimitError,
    AIRequestError,
    AITransientError,
    LocalRateLimitError,
)

from conftest import StatusError


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


# ---------------------------------------------------------------------------
# MinIntervalGate
# ---------------------------------------------------------------------------


class TestMinIntervalGate:
    def test_first_call_passes(self):
        MinIntervalGate(2.0, clock=FakeClock()).acquire()

    def test_second_call_too_soon_fails_fast(self):
        clock = FakeClock()
        gate = MinIntervalGate(2.0, clock=clock)
        gate.acquire()
        clock.now += 0.5
        with pytest.raises(LocalRateLimitError) as exc_info:
            gate.acquire()
        assert exc_info.value.wait_seconds == 2
        assert "Please wait 2 seconds" in exc_info.value.message

    def test_rejected_call_does_not_reset_window(self):
        clock = FakeClock()
        gate = MinIntervalGate(2.0, clock=clock)
        gate.acquire()
        clock.now += 1.0
        with pytest.raises(LocalRateLimitError):
            gate.acquire()
        clock.now += 1.0
        gate.acquire()

    def test_reset(self):
        gate = MinIntervalGate(2.0, clock=FakeClock())
        gate.acquire()
        gate.reset()
        gate.acquire()

    def test_zero_interval_never_blocks(self):
        gate = MinIntervalGate(0, clock=FakeClock())
        gate.acquire()
        gate.acquire()


# ---------------------------------------------------------------------------
# RetryPolicy
# ---------------------------------------------------------------------------


class TestRetryPolicy:
    def test_transient_errors_are_retried_with_backoff(self):
        sleeps: list[float] = []
        attempts = {"n": 0}

        def flaky():
            attempts["n"] += 1
            if attempts["n"] < 3:
                raise AITransientError("503")
            return "ok"

        policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=sleeps.append)
        assert policy.call(flaky) == "ok"
        assert attempts["n"] == 3
        assert sleeps == [1.0, 2.0]

    def test_gives_up_after_max_attempts(self):
        attempts = {"n": 0}

        def always_down():
            attempts["n"] += 1
            raise AITransientError("down")

        with pytest.raises(AITransientError):
            RetryPolicy(3, 0, sleep=lambda s: None).call(always_down)
        assert attempts["n"] == 3

    @pytest.mark.parametrize("error", [AIAuthenticationError("bad"), AIRateLimitError("slow")])
    def test_non_transient_errors_are_not_retried(self, error):
        attempts = {"n": 0}

        def fail():
            attempts["n"] += 1
            raise error

        with pytest.raises(type(error)):
            RetryPolicy(3, 0, sleep=lambda s: None).call(fail)
        assert attempts["n"] == 1


# ---------------------------------------------------------------------------
# classify_llm_error
# ---------------------------------------------------------------------------


class TestClassifyLLMError:
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth(self, status):
        mapped = classify_llm_error(StatusError(status))
        assert isinstance(mapped, AIAuthenticationError)
        assert mapped.message == "Invalid OpenAI API key. Please check your configuration."

    def test_rate_limit_is_not_retryable(self):
        mapped = classify_llm_error(StatusError(429))
        assert isinstance(mapped, AIRateLimitError)
        assert mapped.retryable is False

    def test_other_client_error(self):
        mapped = classify_llm_error(StatusError(400, "bad request"))
        assert isinstance(mapped, AIRequestError)
        assert mapped.status_code == 400

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_server_errors_are_transient(self, status):
        mapped = classify_llm_error(StatusError(status))
        assert isinstance(mapped, AITransientError)
        assert mapped.retryable is True

    def test_network_errors_are_transient(self):
        assert isinstance(classify_llm_error(httpx.ConnectError("refused")), AITransientError)
        assert isinstance(classify_llm_error(TimeoutError()), AITransientError)

    def test_unknown_errors_pass_through(self):
        exc = KeyError("x")
        assert classify_llm_error(exc) is exc
