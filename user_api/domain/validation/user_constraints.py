"""
Attribute constraints of the User resource.

``USER_CONSTRAINTS`` maps each attribute to its ordered rules;
``validate_user`` applies them and returns violations in attribute order.
"""

import re
from collections.abc import Mapping
from typing import Any

from user_api.core.exceptions import ConstraintViolation
from user_api.domain.validation.rules import (
    NOT_BLANK_MESSAGE,
    Rule,
    does_not_match,
    email_format,
    matches,
    max_length,
    min_count,
    not_blank,
    not_null,
)
from user_api.domain.validation.unique_values import ContainsUniqueValues

NAME_MAX_LENGTH = 48
SURNAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
NOTE_MAX_LENGTH = 4096

NAME_GRAMMAR_MESSAGE = (
    'The "name" attribute accepts uppercase letter starting forenames containing letters, '
    "hyphen or apostrophe symbols only and separated by single space symbols."
)
NAME_PUNCTUATION_MESSAGE = 'The "name" may contain hyphens and apostrophes wrapped by letters only.'
SURNAME_GRAMMAR_MESSAGE = (
    'The "surname" attribute accepts letters, hyphen and apostrophe symbols containing '
    "surnames separated by single space symbols only."
)
SURNAME_PUNCTUATION_MESSAGE = 'The "surname" may contain hyphens and apostrophes wrapped by letters only.'
SURNAME_UPPERCASE_MESSAGE = 'The "surname" has to contain at least one uppercase letter.'
EMAIL_ALREADY_USED_MESSAGE = "This value is already used."

# Any Unicode letter: a word character that is neither a digit nor an underscore.
_LETTER = r"[^\W\d_]"
# A letter, optionally followed by letters, hyphens or apostrophes, ending with a letter.
_WORD = rf"{_LETTER}(?:(?:{_LETTER}|['-])*{_LETTER})?"
WORDS_PATTERN = re.compile(rf"{_WORD}(?: {_WORD})*")
DOUBLED_PUNCTUATION_PATTERN = re.compile(r"['-]{2}")


def is_forename_sequence(value: str) -> bool:
    """Single-space separated words, each starting with an uppercase letter."""
    if WORDS_PATTERN.fullmatch(value) is None:
        return False
    return all(word[0].isupper() for word in value.split(" "))


def is_surname_sequence(value: str) -> bool:
    """Single-space separated words of letters, hyphens and apostrophes."""
    return WORDS_PATTERN.fullmatch(value) is not None


def has_uppercase_letter(value: str) -> bool:
    """True when ``value`` holds an uppercase letter, or holds no letters at all."""
    letters = [char for char in value if char.isalpha()]
    return not letters or any(char.isupper() for char in letters)


USER_CONSTRAINTS: dict[str, tuple[Rule, ...]] = {
    "name": (
        not_blank(),
        max_length(NAME_MAX_LENGTH),
        matches(is_forename_sequence, NAME_GRAMMAR_MESSAGE),
        does_not_match(DOUBLED_PUNCTUATION_PATTERN, NAME_PUNCTUATION_MESSAGE),
    ),
    "surname": (
        not_blank(),
        max_length(SURNAME_MAX_LENGTH),
        matches(is_surname_sequence, SURNAME_GRAMMAR_MESSAGE),
        does_not_match(DOUBLED_PUNCTUATION_PATTERN, SURNAME_PUNCTUATION_MESSAGE),
        matches(has_uppercase_letter, SURNAME_UPPERCASE_MESSAGE),
    ),
    "email": (
        not_blank(),
        max_length(EMAIL_MAX_LENGTH),
        email_format(),
    ),
    "gender": (not_blank(),),
    "roles": (
        min_count(1),
        ContainsUniqueValues(mode=ContainsUniqueValues.MODE_STRICT),
    ),
    "note": (max_length(NOTE_MAX_LENGTH),),
    "active": (not_null(NOT_BLANK_MESSAGE),),
}

ATTRIBUTE_ORDER: tuple[str, ...] = tuple(USER_CONSTRAINTS)


def validate_user(values: Mapping[str, Any]) -> list[ConstraintViolation]:
    """
    Apply every attribute rule to ``values``.

    Args:
        values: Attribute values keyed by name; missing keys are treated as ``None``

    Returns:
        Violations ordered by attribute, then by rule
    """
    violations: list[ConstraintViolation] = []
    for attribute, rules in USER_CONSTRAINTS.items():
        value = values.get(attribute)
        for rule in rules:
            violations.extend(ConstraintViolation(attribute, message) for message in rule(value))
    return violations
