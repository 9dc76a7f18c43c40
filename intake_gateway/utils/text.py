from typing import Any


def clean_text(value: Any) -> str:
    """Coerce a loosely typed form value to a trimmed string.

    ``None`` becomes an empty string; anything else goes through ``str()``
    before surrounding whitespace is removed.

    Args:
        value: Raw value from the decoded JSON payload.

    Returns:
        str: Trimmed text.
    """
    if value is None:
        return ""
    return str(value).strip()


def normalize_slug(value: Any) -> str:
    """Trim and lower-case a tenant identifier."""
    return clean_text(value).lower()
