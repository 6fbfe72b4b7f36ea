"""
Tests for the retry policy state machine
"""
import pytest

from sdp_bridge.errors import OutcomeCategory
from sdp_bridge.services.retry import DEFAULT_RETRY_POLICY, RetryDecision, RetryPolicy


def replay(policy: RetryPolicy, outcome: OutcomeCategory, failures: int):
    """Feed `failures` consecutive outcomes of one category; return (delays, attempts made)"""
    delays = []
    attempt = 0
    for _ in range(failures):
        attempt += 1
        decision = policy.decide(outcome, attempt)
        if not decision.retry:
            return delays, attempt
        delays.append(decision.delay)
    return delays, attempt + 1


class TestRateLimited:
    """Test exponential backoff on 429"""

    def test_backoff_sequence(self):
        policy = DEFAULT_RETRY_POLICY
        assert policy.decide(OutcomeCategory.RATE_LIMITED, 1) == RetryDecision(True, 0.1)
        assert policy.decide(OutcomeCategory.RATE_LIMITED, 2) == RetryDecision(True, 0.2)
        assert policy.decide(OutcomeCategory.RATE_LIMITED, 3) == RetryDecision(True, 0.4)
        assert not policy.decide(OutcomeCategory.RATE_LIMITED, 4).retry

    def test_three_failures_then_success(self):
        delays, attempts = replay(DEFAULT_RETRY_POLICY, OutcomeCategory.RATE_LIMITED, 3)
        assert delays == [0.1, 0.2, 0.4]
        assert attempts == 4

    def test_four_failures_give_up(self):
        delays, attempts = replay(DEFAULT_RETRY_POLICY, OutcomeCategory.RATE_LIMITED, 10)
        assert delays == [0.1, 0.2, 0.4]
        assert attempts == 4


class TestSingleRetryOutcomes:
    """Test outcomes that get at most one retry"""

    def test_server_unavailable(self):
        assert DEFAULT_RETRY_POLICY.decide(OutcomeCategory.SERVER_UNAVAILABLE, 1) == RetryDecision(True, 0.5)
        assert not DEFAULT_RETRY_POLICY.decide(OutcomeCategory.SERVER_UNAVAILABLE, 2).retry

    def test_timeout(self):
        assert DEFAULT_RETRY_POLICY.decide(OutcomeCategory.TIMEOUT, 1) == RetryDecision(True, 0.0)
        assert not DEFAULT_RETRY_POLICY.decide(OutcomeCategory.TIMEOUT, 2).retry

    def test_categories_have_separate_budgets(self):
        """Earlier rate limits do not use up the 5xx or timeout retry"""
        policy = DEFAULT_RETRY_POLICY
        assert policy.decide(OutcomeCategory.RATE_LIMITED, 1).retry
        assert policy.decide(OutcomeCategory.RATE_LIMITED, 2).retry
        assert policy.decide(OutcomeCategory.SERVER_UNAVAILABLE, 1) == RetryDecision(True, 0.5)
        assert policy.decide(OutcomeCategory.TIMEOUT, 1) == RetryDecision(True, 0.0)
        assert not policy.decide(OutcomeCategory.SERVER_UNAVAILABLE, 2).retry


class TestNeverRetried:
    @pytest.mark.parametrize("outcome", [OutcomeCategory.CONNECTION_FAILED, OutcomeCategory.NON_TRANSIENT])
    @pytest.mark.parametrize("occurrence", [1, 2, 5])
    def test_gives_up(self, outcome, occurrence):
        assert DEFAULT_RETRY_POLICY.decide(outcome, occurrence) == RetryDecision(False)


class TestCustomPolicy:
    def test_tuned_backoff(self):
        policy = RetryPolicy(initial_backoff=1.0, max_rate_limit_retries=1)
        assert policy.decide(OutcomeCategory.RATE_LIMITED, 1) == RetryDecision(True, 1.0)
        assert not policy.decide(OutcomeCategory.RATE_LIMITED, 2).retry
