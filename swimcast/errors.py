"""Exceptions raised at the request boundary."""
from typing import List, Optional


class SwimcastError(Exception):
    """Base class for swimcast errors."""


class InvalidRequestError(SwimcastError):
    """A request that cannot be scored (bad coordinates, unknown experience key)."""

    def __init__(self, detail: str, valid_levels: Optional[List[str]] = None):
        super().__init__(detail)
        self.detail = detail
        self.valid_levels = valid_levels

    def to_dict(self) -> dict:
        """Convert to a serializable error body."""
        body = {"error": self.detail}
        if self.valid_levels is not None:
            body["valid_levels"] = self.valid_levels
        return body
