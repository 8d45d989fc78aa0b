"""Input sanitisation.

Neutralises prompt-injection phrases and HTML metacharacters in text typed by
a family member before it is placed into a generation request.

The stages run in a fixed order:

1. injection phrases are replaced with the ``[filtered]`` marker,
2. the text is cut to ``max_length`` characters,
3. ``& < > " ' /`` are escaped to HTML entities,
4. surrounding whitespace is stripped.

Entities produced by stage 3 are decoded again on the way in, which makes
``sanitize`` idempotent: feeding its output back through yields the same
string and records no new event.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from familynight.security.audit_log import SecurityEventType, preview

if TYPE_CHECKING:
    from familynight.security.audit_log import SecurityLog

FILTER_MARKER = "[filtered]"
DEFAULT_MAX_LENGTH = 500

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_INJECTION_PATTERNS: list[re.Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in [
        r"ignore\s+previous\s+instructions",
        r"disregard\s+all\s+prior",
        r"forget\s+what\s+I\s+said",
        r"new\s+instructions:",
        r"system:",
        r"assistant:",
        r"you\s+are\s+now",
        r"<\|.*?\|>",  # special tokens
        r"```",
        r"\[INST\]",
        r"\[/INST\]",
        r"<s>",
        r"</s>",
    ]
]

# Replacing a phrase can splice its neighbours into a new match
_MAX_PASSES = 8

_HTML_ESCAPES: dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}
_HTML_UNESCAPES: dict[str, str] = {v: k for k, v in _HTML_ESCAPES.items()}

_ESCAPE_RE = re.compile(r"[&<>\"'/]")
_UNESCAPE_RE = re.compile("|".join(re.escape(entity) for entity in _HTML_UNESCAPES))

_SUSPICIOUS_PATTERNS: list[re.Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in [
        r"ignore",
        r"system",
        r"instruction",
        r"prompt",
        r"<script",
        r"javascript:",
        r"on\w+=",  # inline event handlers
        r"eval\(",
        r"function\s*\(",
    ]
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def escape_html(text: str) -> str:
    """Replace ``& < > " ' /`` with their HTML entities."""
    return _ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group(0)], text)


def unescape_html(text: str) -> str:
    """Inverse of :func:`escape_html` for exactly the entities it produces."""
    return _UNESCAPE_RE.sub(lambda m: _HTML_UNESCAPES[m.group(0)], text)


def strip_injections(text: str) -> tuple[str, bool]:
    """Replace injection phrases with the marker until none remain.

    Returns the filtered text and whether anything was replaced.
    """
    found = False
    for _ in range(_MAX_PASSES):
        replaced = 0
        for pattern in _INJECTION_PATTERNS:
            text, count = pattern.subn(FILTER_MARKER, text)
            replaced += count
        if not replaced:
            break
        found = True
    return text, found


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def sanitize(
    text: object,
    max_length: int = DEFAULT_MAX_LENGTH,
    log: Optional[SecurityLog] = None,
) -> str:
    """Return a safe version of *text* for use inside a prompt.

    Non-string or empty input yields ``""``. Whenever sanitising changed the
    input and *log* is given, a ``prompt_injection_attempt`` event with
    100-character previews of both versions is recorded; the full text is
    never logged.
    """
    if not text or not isinstance(text, str):
        return ""

    decoded = unescape_html(text)
    filtered, injected = strip_injections(decoded)
    truncated = len(filtered) > max_length
    escaped = escape_html(filtered[:max_length])

    if log is not None and escaped != text:
        log.record(
            SecurityEventType.PROMPT_INJECTION_ATTEMPT,
            original=preview(text),
            sanitized=preview(escaped),
            filtered=injected,
            truncated=truncated,
        )

    return escaped.strip()


def is_suspicious_input(text: str) -> bool:
    """Cheap advisory check for words often seen in injection attempts.

    Much noisier than :func:`sanitize`; use it to decide what to review, not
    what to reject.
    """
    if not isinstance(text, str):
        return False
    return any(pattern.search(text) for pattern in _SUSPICIOUS_PATTERNS)


def sanitize_filename(filename: str) -> str:
    """Make *filename* safe to use as a download name (no path traversal)."""
    name = re.sub(r"[/\\]", "", filename)
    name = name.replace("..", "")
    name = re.sub(r"[^a-zA-Z0-9._-]", "_", name)
    return name[:100]
