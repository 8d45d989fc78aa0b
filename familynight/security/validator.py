"""Per-context length and character-class policy for user input."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Mapping, Optional

from familynight.security.audit_log import SecurityEventType
from familynight.security.sanitizer import FILTER_MARKER, sanitize, unescape_html

if TYPE_CHECKING:
    from familynight.security.audit_log import SecurityLog

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Input cannot be empty"


class ValidationContext(Enum):
    """Which policy applies to a piece of input."""

    NAME = "name"
    STORY = "story"
    CHAT = "chat"
    GENERAL = "general"

    @classmethod
    def coerce(cls, value: ValidationContext | str | None) -> ValidationContext:
        """Accept an enum member or its value; unknown strings mean GENERAL."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.GENERAL


@dataclass(frozen=True)
class ValidationRule:
    """Length bounds and allowed characters for one context."""

    min_length: int
    max_length: int
    allowed_chars: re.Pattern[str]
    error_message: str
    permits_marker: bool = True


_PROSE_CHARS = re.compile(r"[a-zA-Z0-9\s\-',.!?()]+")

RULES: dict[ValidationContext, ValidationRule] = {
    ValidationContext.NAME: ValidationRule(
        min_length=1,
        max_length=50,
        allowed_chars=re.compile(r"[a-zA-Z0-9\s\-'.]+"),
        error_message="Names can only contain letters, numbers, spaces, hyphens, and apostrophes",
        permits_marker=False,
    ),
    ValidationContext.STORY: ValidationRule(
        min_length=10,
        max_length=500,
        allowed_chars=_PROSE_CHARS,
        error_message="Story text contains invalid characters",
    ),
    ValidationContext.CHAT: ValidationRule(
        min_length=1,
        max_length=200,
        allowed_chars=_PROSE_CHARS,
        error_message="Message contains invalid characters",
    ),
    ValidationContext.GENERAL: ValidationRule(
        min_length=1,
        max_length=500,
        allowed_chars=_PROSE_CHARS,
        error_message="Input contains invalid characters",
    ),
}


@dataclass(frozen=True)
class ValidationResult:
    """Either ``valid`` with ``sanitized`` text, or invalid with ``error``."""

    valid: bool
    sanitized: str = ""
    error: str = ""

    @classmethod
    def ok(cls, sanitized: str) -> ValidationResult:
        return cls(valid=True, sanitized=sanitized)

    @classmethod
    def fail(cls, error: str) -> ValidationResult:
        return cls(valid=False, error=error)


@dataclass
class MultiValidationResult:
    """Outcome of validating every field of a form."""

    valid: bool
    sanitized: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


def _characters_to_check(sanitized: str, rule: ValidationRule) -> str:
    # Entities stand for characters the user typed; check those instead.
    text = unescape_html(sanitized)
    if rule.permits_marker:
        text = text.replace(FILTER_MARKER, "").strip()
    return text


def validate(
    text: object,
    context: ValidationContext | str = ValidationContext.GENERAL,
    log: Optional[SecurityLog] = None,
) -> ValidationResult:
    """Sanitise *text* and check it against the policy for *context*.

    Rules are checked in order (too long, too short, characters) and the
    first failure is returned.
    """
    if not text:
        return ValidationResult.fail(EMPTY_INPUT_MESSAGE)

    ctx = ValidationContext.coerce(context)
    rule = RULES[ctx]
    sanitized = sanitize(text, log=log)

    error = ""
    if len(sanitized) > rule.max_length:
        error = f"Input too long (max {rule.max_length} characters)"
    elif len(sanitized) < rule.min_length:
        error = f"Input too short (min {rule.min_length} characters)"
    elif not rule.allowed_chars.fullmatch(_characters_to_check(sanitized, rule)):
        error = rule.error_message

    if error:
        logger.debug("Input rejected for %s context: %s", ctx.value, error)
        if log is not None:
            log.record(
                SecurityEventType.INPUT_VALIDATION_FAILED,
                context=ctx.value,
                error=error,
            )
        return ValidationResult.fail(error)

    return ValidationResult.ok(sanitized)


def validate_many(
    inputs: Mapping[str, object],
    contexts: Mapping[str, ValidationContext | str],
    log: Optional[SecurityLog] = None,
) -> MultiValidationResult:
    """Validate several form fields; fields without a context use GENERAL."""
    result = MultiValidationResult(valid=True)
    for name, value in inputs.items():
        outcome = validate(value, contexts.get(name, ValidationContext.GENERAL), log=log)
        if outcome.valid:
            result.sanitized[name] = outcome.sanitized
        else:
            result.errors[name] = outcome.error
            result.valid = False

    if not result.valid:
        result.sanitized = {}
    return result
