"""
Retry policy for transient SDP failures

The policy is a pure function of (outcome category, failures of that
category so far).
It never looks at request content and performs no I/O, so it can be
exercised with synthetic outcome sequences.

| Outcome              | Policy                                              |
|----------------------|-----------------------------------------------------|
| HTTP 429             | exponential backoff 100ms, 200ms, 400ms (3 retries) |
| HTTP 502/503/504     | one retry after 500ms                               |
| Timeout              | one retry, no extra delay                           |
| Anything else        | no retry                                            |

Each category has its own budget, so a 502 after a run of 429s still gets
its retry. The total number of attempts stays bounded by the sum.
"""
from dataclasses import dataclass

from sdp_bridge.errors import OutcomeCategory


INITIAL_BACKOFF_SECONDS = 0.1
MAX_RATE_LIMIT_RETRIES = 3
SERVER_ERROR_DELAY_SECONDS = 0.5


@dataclass(frozen=True)
class RetryDecision:
    """Either retry after `delay` seconds, or give up"""
    retry: bool
    delay: float = 0.0


GIVE_UP = RetryDecision(retry=False)


@dataclass(frozen=True)
class RetryPolicy:
    initial_backoff: float = INITIAL_BACKOFF_SECONDS
    max_rate_limit_retries: int = MAX_RATE_LIMIT_RETRIES
    server_error_delay: float = SERVER_ERROR_DELAY_SECONDS

    def decide(self, outcome: OutcomeCategory, occurrence: int) -> RetryDecision:
        """
        Decide what to do after a failed attempt

        Args:
            outcome: Category of the failure just observed
            occurrence: How many times this category has failed so far in
                the operation, including this failure (1-based)

        Returns:
            RetryDecision for the next step
        """
        if outcome == OutcomeCategory.RATE_LIMITED:
            if occurrence <= self.max_rate_limit_retries:
                return RetryDecision(True, self.initial_backoff * 2 ** (occurrence - 1))
            return GIVE_UP

        if outcome == OutcomeCategory.SERVER_UNAVAILABLE:
            if occurrence == 1:
                return RetryDecision(True, self.server_error_delay)
            return GIVE_UP

        if outcome == OutcomeCategory.TIMEOUT:
            if occurrence == 1:
                return RetryDecision(True, 0.0)
            return GIVE_UP

        return GIVE_UP


DEFAULT_RETRY_POLICY = RetryPolicy()
