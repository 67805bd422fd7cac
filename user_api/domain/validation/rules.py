"""
Generic attribute rules.

Every rule is a callable taking the submitted value and returning a list of
violation messages (empty when the value is acceptable). Rules that check the
content of a string skip ``None`` and ``""`` so that a missing value is only
reported once, by ``not_blank``.
"""

import re
from collections.abc import Callable, Sized
from typing import Any

import email_validator
from email_validator import EmailNotValidError, validate_email

from user_api.domain.utils.text_utils import mb_trim

Rule = Callable[[Any], list[str]]

NOT_BLANK_MESSAGE = "This value should not be blank."
EMAIL_MESSAGE = "This value is not a valid email address."

# Addresses on the link-local ".local" domain are accepted
if "local" in email_validator.SPECIAL_USE_DOMAIN_NAMES:
    email_validator.SPECIAL_USE_DOMAIN_NAMES.remove("local")


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def not_blank(
    message: str = NOT_BLANK_MESSAGE,
    normalizer: Callable[[str], str] | None = mb_trim,
) -> Rule:
    """
    Reject ``None``, empty strings, empty collections and, after applying
    ``normalizer``, whitespace-only strings.
    """

    def rule(value: Any) -> list[str]:
        if value is None:
            return [message]
        if isinstance(value, str):
            text = normalizer(value) if normalizer is not None else value
            return [message] if text == "" else []
        if isinstance(value, Sized) and len(value) == 0:
            return [message]
        return []

    return rule


def not_null(message: str = NOT_BLANK_MESSAGE) -> Rule:
    """Reject only ``None``; ``False`` and ``0`` are acceptable values."""

    def rule(value: Any) -> list[str]:
        return [message] if value is None else []

    return rule


def max_length(limit: int, message: str | None = None) -> Rule:
    """Reject strings longer than ``limit`` characters."""
    if message is None:
        unit = "character" if limit == 1 else "characters"
        message = f"This value is too long. It should have {limit} {unit} or less."

    def rule(value: Any) -> list[str]:
        if not isinstance(value, str):
            return []
        return [message] if len(value) > limit else []

    return rule


def min_count(limit: int, message: str | None = None) -> Rule:
    """Reject collections holding fewer than ``limit`` elements; ``None`` counts as empty."""
    if message is None:
        unit = "element" if limit == 1 else "elements"
        message = f"This collection should contain {limit} {unit} or more."

    def rule(value: Any) -> list[str]:
        count = 0 if value is None else len(value)
        return [message] if count < limit else []

    return rule


def matches(predicate: Callable[[str], bool], message: str) -> Rule:
    """Reject non-empty strings for which ``predicate`` does not hold."""

    def rule(value: Any) -> list[str]:
        if _is_empty(value) or not isinstance(value, str):
            return []
        return [] if predicate(value) else [message]

    return rule


def does_not_match(pattern: str | re.Pattern[str], message: str) -> Rule:
    """Reject non-empty strings in which ``pattern`` is found."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def rule(value: Any) -> list[str]:
        if _is_empty(value) or not isinstance(value, str):
            return []
        return [message] if compiled.search(value) else []

    return rule


def email_format(
    message: str = EMAIL_MESSAGE,
    normalizer: Callable[[str], str] | None = mb_trim,
) -> Rule:
    """
    Reject strings that are not syntactically valid email addresses.

    The syntax is checked on the normalized value. No DNS lookups are made,
    and reserved or special-use domains such as ``.local`` are accepted.
    """

    def rule(value: Any) -> list[str]:
        if _is_empty(value) or not isinstance(value, str):
            return []
        address = normalizer(value) if normalizer is not None else value
        try:
            validate_email(address, check_deliverability=False, globally_deliverable=False)
        except EmailNotValidError:
            return [message]
        return []

    return rule
