"""
Bounded retry with exponential backoff.

A RetryPolicy describes how many attempts an operation gets and how long to
wait between them. retry_on_error drives an operation under a policy: the
first attempt runs immediately, each later attempt sleeps the calling thread
for the next delay in the schedule, and once the budget is spent the last
error is raised as-is.
"""

# Standard
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TypeVar
import random
import time

# First Party
import aconfig
import alog

# Local
from . import config
from .exceptions import assert_config

log = alog.use_channel("RETRY")

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable description of a retry budget and its backoff schedule

    Attributes:
        steps:  int
            Maximum number of attempts, including the first one
        duration:  float
            Base delay in seconds before the second attempt
        factor:  float
            Multiplier applied to the delay after each attempt
        jitter:  float
            Fraction of each delay that may be added as random jitter
        cap:  Optional[float]
            Upper bound on the un-jittered delay
    """

    steps: int
    duration: float = 0.0
    factor: float = 1.0
    jitter: float = 0.0
    cap: Optional[float] = None

    def __post_init__(self):
        assert_config(self.steps >= 1, f"Retry steps must be >= 1, got {self.steps}")
        assert_config(self.duration >= 0, "Retry duration must be >= 0")
        assert_config(self.factor >= 1, "Retry factor must be >= 1")
        assert_config(self.jitter >= 0, "Retry jitter must be >= 0")
        assert_config(self.cap is None or self.cap >= 0, "Retry cap must be >= 0")

    @classmethod
    def from_config(cls, retry_config: Optional[aconfig.Config] = None) -> "RetryPolicy":
        """Build a policy from the retry section of the library config"""
        retry_config = retry_config or config.retry
        return cls(
            steps=retry_config.steps,
            duration=retry_config.duration,
            factor=retry_config.factor,
            jitter=retry_config.jitter,
            cap=retry_config.cap,
        )

    @classmethod
    def no_backoff(cls, steps: int) -> "RetryPolicy":
        """A policy that retries immediately"""
        return cls(steps=steps)

    def delays(self) -> Iterator[float]:
        """Yield the un-jittered delay before each attempt after the first"""
        delay = self.duration
        for _ in range(self.steps - 1):
            if self.cap is not None:
                delay = min(delay, self.cap)
            yield delay
            delay *= self.factor

    def jittered(self, delay: float) -> float:
        """Add the configured random jitter to a delay"""
        if self.jitter > 0 and delay > 0:
            return delay + random.uniform(0, self.jitter * delay)
        return delay


def retry_on_error(
    policy: RetryPolicy,
    operation: Callable[[], T],
    should_retry: Optional[Callable[[Exception], bool]] = None,
) -> T:
    """Run the operation until it returns or the retry budget is spent

    Args:
        policy:  RetryPolicy
            The budget and backoff schedule
        operation:  Callable[[], T]
            The zero-argument operation to run. A raised exception counts as a
            failed attempt.
        should_retry:  Optional[Callable[[Exception], bool]]
            Classifier for errors that may be retried. Errors it rejects are
            raised immediately. If None, every error is retried.

    Returns:
        result:  T
            The return value of the first successful attempt
    """
    delays = policy.delays()
    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except Exception as err:  # pylint: disable=broad-except
            if should_retry is not None and not should_retry(err):
                log.debug("Attempt %d failed with non-retriable error: %s", attempt, err)
                raise
            delay = next(delays, None)
            if delay is None:
                log.debug("Retry budget of %d attempts exhausted", policy.steps)
                raise
            delay = policy.jittered(delay)
            log.debug2("Attempt %d failed. Retrying in %fs", attempt, delay)
            if delay:
                time.sleep(delay)
