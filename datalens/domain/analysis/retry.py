from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, Optional, Tuple, Type

import requests


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff settings for the LLM call.

    ``max_attempts`` counts the first attempt. The delay before attempt ``n``
    (1-based, n >= 2) is ``base_delay * multiplier ** (n - 2)``.
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    retryable_statuses: FrozenSet[int] = frozenset({429})
    retryable_exceptions: Tuple[Type[BaseException], ...] = field(
        default=(
            requests.ConnectionError,
            requests.Timeout,
            requests.exceptions.ChunkedEncodingError,
            requests.exceptions.ContentDecodingError,
        )
    )

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.multiplier < 1:
            raise ValueError("base_delay must be >= 0 and multiplier >= 1")

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.llm_max_attempts,
            base_delay=settings.llm_retry_base_delay,
            multiplier=settings.llm_retry_multiplier,
        )

    def is_retryable(
        self,
        status_code: Optional[int] = None,
        error: Optional[BaseException] = None,
    ) -> bool:
        """429-style statuses and transport errors are retryable; nothing else is."""
        if error is not None:
            return isinstance(error, self.retryable_exceptions)
        return status_code in self.retryable_statuses

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed ``attempt`` (1-based) before the next one."""
        return self.base_delay * (self.multiplier ** (attempt - 1))

    def delays(self) -> Iterator[float]:
        """Every delay the policy can produce, in order."""
        for attempt in range(1, self.max_attempts):
            yield self.delay_for(attempt)
