"""Bounded fixed-delay retry for fallible filesystem calls.

Transient failures (antivirus scans, another process briefly holding a
handle, network-share hiccups) usually clear within a few hundred
milliseconds. RetryPolicy absorbs them with a small, fixed number of
attempts so callers never wait unboundedly.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from filedeck.core.errors import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY_SECONDS = 0.1


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry configuration for copy and move primitives.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        delay: Seconds to wait between consecutive attempts.
        sleep: Function used to wait. Tests inject a fake clock here.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay: float = DEFAULT_DELAY_SECONDS
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate policy values after initialization."""
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.delay < 0:
            msg = f"delay cannot be negative, got {self.delay}"
            raise ValueError(msg)

    def run(self, operation: Callable[[], T], *, description: str) -> T:
        """Call ``operation`` until it succeeds or attempts run out.

        Only OSError is treated as retryable; anything else propagates
        immediately.

        Args:
            operation: Zero-argument callable performing the I/O.
            description: Short text used in log lines and the final error.

        Returns:
            Whatever ``operation`` returns on its first successful call.

        Raises:
            RetryExhaustedError: If every attempt raised OSError.
        """
        attempt = 1
        while True:
            try:
                return operation()
            except OSError as e:
                if attempt >= self.max_attempts:
                    logger.warning("%s gave up after %d attempt(s)", description, self.max_attempts)
                    raise RetryExhaustedError(description, self.max_attempts, e) from e
                logger.warning(
                    "%s failed (attempt %d/%d): %s; retrying in %.0f ms",
                    description,
                    attempt,
                    self.max_attempts,
                    e,
                    self.delay * 1000,
                )
                self.sleep(self.delay)
            attempt += 1
