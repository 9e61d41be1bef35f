"""
Text sanitization for untrusted query input.

Everything that ends up inside a pattern-matching query passes through
sanitize_text first; LIKE metacharacters that survive the allow-list are
escaped by escape_like when the pattern is built.
"""

import re

# Punctuation that survives sanitization besides letters, digits and whitespace.
ALLOWED_PUNCTUATION = frozenset("-_.,!?:#@+/")

LIKE_ESCAPE = "\\"

_SLUG_STRIP = re.compile(r"[^a-z0-9_-]")
_WHITESPACE = re.compile(r"\s+")


def is_allowed_char(ch: str) -> bool:
    return ch.isalnum() or ch.isspace() or ch in ALLOWED_PUNCTUATION


def sanitize_text(value: str | None, max_length: int) -> str:
    """
    Trim, truncate to max_length and drop characters outside the allow-list.

    Never raises; None and non-strings collapse to "". The result is a
    fixed point: sanitize_text(sanitize_text(s, n), n) == sanitize_text(s, n).
    """
    if not isinstance(value, str) or max_length <= 0:
        return ""

    text = value.strip()[:max_length]
    kept = "".join(ch for ch in text if is_allowed_char(ch))
    return kept.strip()


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def slugify(name: str) -> str:
    """Category slugs: lowercase, whitespace runs become '-', other symbols dropped."""
    slug = _WHITESPACE.sub("-", name.strip().lower())
    return _SLUG_STRIP.sub("", slug)
