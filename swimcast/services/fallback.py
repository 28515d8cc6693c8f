"""Ordered fallback chain for fields that several sources can supply."""
from typing import Callable, List, Optional, Tuple

from swimcast.models.reading import SOURCE_UNAVAILABLE, Sourced

Attempt = Callable[[], Optional[float]]


class FallbackChain:
    """
    Tries value sources in priority order until one yields a value.

    Each attempt is a zero-argument callable returning a value or ``None``;
    later attempts are only evaluated when every earlier one came up empty.
    The resolved value carries the tag of the attempt that supplied it.
    """

    def __init__(self, attempts: List[Tuple[str, Attempt]] = None):
        self.attempts: List[Tuple[str, Attempt]] = list(attempts or [])

    def then(self, source: str, attempt: Attempt) -> "FallbackChain":
        """Append a lower-priority attempt; returns the chain for chaining."""
        self.attempts.append((source, attempt))
        return self

    def resolve(self) -> Sourced:
        """Evaluate attempts in order and return the first value found."""
        for source, attempt in self.attempts:
            value = attempt()
            if value is not None:
                return Sourced(value=value, source=source)
        return Sourced(value=None, source=SOURCE_UNAVAILABLE)
