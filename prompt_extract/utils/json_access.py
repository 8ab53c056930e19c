"""Safe JSON parsing and shape-checked accessors for untrusted metadata."""

import json
from typing import Any, Dict, Optional


def safe_json_loads(text: Any) -> Any:
    """Parse JSON, returning None instead of raising on malformed or non-string input."""
    if not isinstance(text, (str, bytes, bytearray)):
        return None
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def load_json_object(text: Any) -> Optional[Dict[str, Any]]:
    """Parse JSON and return it only if it is an object."""
    value = safe_json_loads(text)
    return value if isinstance(value, dict) else None


def get_dict(obj: Any, key: str) -> Optional[Dict[str, Any]]:
    if not isinstance(obj, dict):
        return None
    value = obj.get(key)
    return value if isinstance(value, dict) else None


def get_str(obj: Any, key: str) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    value = obj.get(key)
    return value if isinstance(value, str) else None


def get_nonblank_str(obj: Any, key: str) -> Optional[str]:
    """Return obj[key] if it is a string with non-whitespace content."""
    value = get_str(obj, key)
    if value is None or not value.strip():
        return None
    return value
