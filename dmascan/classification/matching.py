"""Text matching primitive for signature patterns.

Matching is plain, case-insensitive substring containment. Hardware IDs are
never parsed into vendor/product fields: a pattern such as
``VID_1A2C&PID_2124`` only matches when that exact text appears somewhere in
the device's reported identifier string.
"""

from collections.abc import Iterable


def normalize(text: str) -> str:
    """Fold text to the single case convention used for comparison."""
    return text.upper()


def find_match(text: str, patterns: Iterable[str]) -> str | None:
    """Find the first pattern contained in text.

    Args:
        text: Text to search (joined hardware IDs or a description).
        patterns: Patterns to look for, in priority order.

    Returns:
        The first matching pattern as given, or None if nothing matched.
        Empty text and empty patterns never match.
    """
    if not text:
        return None

    normalized_text = normalize(text)
    for pattern in patterns:
        if pattern and normalize(pattern) in normalized_text:
            return pattern

    return None


def matches(text: str, patterns: Iterable[str]) -> bool:
    """Check if text contains any of the patterns, ignoring case."""
    return find_match(text, patterns) is not None
