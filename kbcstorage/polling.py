import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from kbcstorage.exceptions import PollingCancelledError, PollingTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_POLL_INTERVAL_S = 0.25


@dataclass(frozen=True)
class PollingPolicy:
    r"""How a poll loop paces and bounds itself.

    The interval is fixed: there is no backoff and no jitter. With neither
    ``max_attempts`` nor ``timeout_s`` set, the loop waits as long as the
    remote side needs.

    Args:
        interval_s: seconds to sleep between two fetches.
        max_attempts: maximum number of fetches before giving up.
        timeout_s: overall deadline, measured from the first fetch.
    """
    interval_s: float = DEFAULT_POLL_INTERVAL_S
    max_attempts: Optional[int] = None
    timeout_s: Optional[float] = None

    def __post_init__(self) -> None:
        if self.interval_s < 0:
            raise ValueError(
                f"interval_s must be non-negative (got {self.interval_s})")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError(
                f"max_attempts must be at least 1 (got {self.max_attempts})")
        if self.timeout_s is not None and self.timeout_s < 0:
            raise ValueError(
                f"timeout_s must be non-negative (got {self.timeout_s})")


def poll_until(
    fetch: Callable[[], T],
    is_done: Callable[[T], bool],
    policy: PollingPolicy = PollingPolicy(),
    cancel_event: Optional[threading.Event] = None,
    description: str = 'operation',
) -> T:
    r"""Calls ``fetch`` until ``is_done`` accepts its result, and returns
    that result. Exceptions raised by ``fetch`` propagate immediately.

    Raises:
        PollingTimeoutError: if ``policy.max_attempts`` fetches were made or
            ``policy.timeout_s`` elapsed without completion.
        PollingCancelledError: if ``cancel_event`` is set.
    """
    deadline = None
    if policy.timeout_s is not None:
        deadline = time.monotonic() + policy.timeout_s

    attempts = 0
    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise PollingCancelledError(
                f"Polling for {description} was cancelled after {attempts} "
                f"attempt(s)")

        value = fetch()
        attempts += 1
        if is_done(value):
            logger.debug("%s completed after %d attempt(s)", description,
                         attempts)
            return value

        if policy.max_attempts is not None and attempts >= policy.max_attempts:
            raise PollingTimeoutError(
                f"{description} did not complete within {attempts} "
                f"attempt(s)")
        if deadline is not None and time.monotonic() >= deadline:
            raise PollingTimeoutError(
                f"{description} did not complete within "
                f"{policy.timeout_s} seconds")

        logger.debug("%s not complete yet (attempt %d), sleeping %.2fs",
                     description, attempts, policy.interval_s)
        if cancel_event is not None:
            if cancel_event.wait(policy.interval_s):
                raise PollingCancelledError(
                    f"Polling for {description} was cancelled after "
                    f"{attempts} attempt(s)")
        else:
            time.sleep(policy.interval_s)
