"""Shape and type checks for provider JSON payloads."""
import math
from typing import Any, Optional

import httpx

# Anything that means "the provider did not give us usable data";
# OverflowError and OSError come from out-of-range epoch timestamps
PROVIDER_ERRORS = (
    httpx.HTTPError,
    KeyError,
    TypeError,
    ValueError,
    AttributeError,
    OverflowError,
    OSError,
)


def as_dict(value: Any, name: str) -> dict:
    """An object from the payload; missing becomes empty, anything else is malformed."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected an object for {name!r}, got {type(value).__name__}")
    return value


def as_list(value: Any, name: str) -> list:
    """An array from the payload; missing becomes empty, anything else is malformed."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"expected an array for {name!r}, got {type(value).__name__}")
    return value


def as_float(value: Any, name: str) -> Optional[float]:
    """A numeric field; None passes through, non-numbers are malformed."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number for {name!r}, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"expected a finite number for {name!r}, got {value!r}")
    return value


def as_text(value: Any, name: str) -> Optional[str]:
    """A string field; None passes through, anything else is malformed."""
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"expected a string for {name!r}, got {type(value).__name__}")
