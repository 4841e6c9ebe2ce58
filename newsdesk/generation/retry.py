"""Exponential backoff for rate-limited generation calls."""

import random
import time
from typing import Callable, Optional, TypeVar

from rich.console import Console

from .errors import RateLimitedError

console = Console()

T = TypeVar("T")


class RetryPolicy:
    """Retry on RateLimitedError with doubling delay plus jitter.

    Attempt n (0-based) waits base_delay * 2**n + uniform(0, max_jitter)
    seconds. With the defaults the first three waits are about 2, 4 and 8
    seconds.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 2.0,
        max_jitter: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_jitter = max_jitter
        self.sleep = sleep
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, llm_config: dict, **kwargs) -> "RetryPolicy":
        """Build from Config.get_llm_config()."""
        return cls(
            max_retries=llm_config.get("max_retries", 3),
            base_delay=llm_config.get("base_delay", 2.0),
            max_jitter=llm_config.get("max_jitter", 2.0),
            **kwargs,
        )

    def delay(self, attempt: int) -> float:
        """Backoff before retry number attempt + 1."""
        return self.base_delay * (2 ** attempt) + self.rng.uniform(0, self.max_jitter)

    def call(self, fn: Callable[[], T], label: str = "generation") -> T:
        """Run fn, retrying rate limits. The last RateLimitedError propagates."""
        attempt = 0
        while True:
            try:
                return fn()
            except RateLimitedError:
                if attempt >= self.max_retries:
                    raise
                wait = self.delay(attempt)
                console.print(
                    f"  [yellow]{label} rate limited, waiting {wait:.1f}s "
                    f"(attempt {attempt + 1}/{self.max_retries})[/yellow]"
                )
                self.sleep(wait)
                attempt += 1
