"""
Collection uniqueness constraint.

``ContainsUniqueValues`` reports a single violation when an iterable holds the
same value twice. Two comparison modes are supported:

* ``strict``: values are equal only when both their type and their value are
  equal (``True`` and ``1`` are distinct). Nested containers and plain objects
  are compared deeply. The scan stops at the first duplicate.
* ``loose``: values are compared by their string form (``True`` and ``1`` both
  become ``"1"``; ``None``, ``False`` and ``""`` all become ``""``).
"""

import enum
import io
import logging
import mmap
import socket
from collections.abc import Iterable, Mapping, Set
from typing import Any

from user_api.core.exceptions import InvalidArgumentError, UnexpectedValueError
from user_api.domain.utils.text_utils import mb_trim

logger = logging.getLogger(__name__)

# Handles to operating system resources have no stable value to compare.
RESOURCE_TYPES: tuple[type, ...] = (io.IOBase, socket.socket, mmap.mmap)


def fingerprint(value: Any, _path: set[int] | None = None) -> tuple:
    """
    Build a hashable, type-tagged representation of ``value``.

    Two values have equal fingerprints exactly when they are equal in type and
    value, recursively. Mapping and set fingerprints do not depend on
    insertion order.

    Args:
        value: Any element of a checked collection

    Returns:
        A nested tuple usable as a set member

    Raises:
        UnexpectedValueError: If ``value`` is, or contains, a resource handle,
            or refers back to itself
    """
    if isinstance(value, RESOURCE_TYPES):
        raise UnexpectedValueError('Values of type "resource" are not supported.')
    if value is None:
        return ("null",)
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, enum.Enum):
        return ("enum", _qualified_name(type(value)), value.name)
    if isinstance(value, float):
        return ("float", repr(value))
    if isinstance(value, (int, str, bytes, complex)):
        return (_qualified_name(type(value)), value)

    # ids of the containers enclosing ``value``; shared references are fine
    path = set() if _path is None else _path
    if id(value) in path:
        raise UnexpectedValueError("Values with circular references are not supported.")
    path.add(id(value))
    try:
        return _container_fingerprint(value, path)
    finally:
        path.discard(id(value))


def _container_fingerprint(value: Any, path: set[int]) -> tuple:
    if isinstance(value, Mapping):
        items = [(fingerprint(k, path), fingerprint(v, path)) for k, v in value.items()]
        return ("mapping", _qualified_name(type(value)), tuple(sorted(items, key=repr)))
    if isinstance(value, Set):
        members = [fingerprint(member, path) for member in value]
        return ("set", _qualified_name(type(value)), tuple(sorted(members, key=repr)))
    if isinstance(value, (list, tuple, bytearray)):
        return ("sequence", _qualified_name(type(value)), tuple(fingerprint(item, path) for item in value))
    if hasattr(value, "__dict__"):
        return ("object", _qualified_name(type(value)), fingerprint(vars(value), path))
    try:
        hash(value)
    except TypeError:
        return ("object", _qualified_name(type(value)), repr(value))
    return ("object", _qualified_name(type(value)), value)


def loose_key(value: Any) -> str:
    """
    Return the string form ``value`` is compared by in loose mode.

    Scalars follow the usual scripting-language string casts; structured
    values are encoded from their fingerprint.
    """
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, enum.Enum):
        return loose_key(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return repr(fingerprint(value))


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class ContainsUniqueValues:
    """
    Constraint asserting that a collection contains no duplicate values.

    Attributes:
        mode: ``"strict"`` (default) or ``"loose"``
        message: Violation message reported when a duplicate is found
    """

    MODE_STRICT = "strict"
    MODE_LOOSE = "loose"
    MODES = (MODE_STRICT, MODE_LOOSE)

    DEFAULT_MESSAGE = "The collection contains duplicate values."

    def __init__(self, mode: str | None = None, message: str | None = None) -> None:
        """
        Initialize the constraint.

        Args:
            mode: Comparison mode; ``None`` selects strict comparison
            message: Violation message; ``None`` selects the default message

        Raises:
            InvalidArgumentError: If ``mode`` is not a supported mode
        """
        if mode is not None and mode not in self.MODES:
            raise InvalidArgumentError('The "mode" parameter value is not valid.')

        self.mode = mode if mode is not None else self.MODE_STRICT
        self.message = message if message is not None else self.DEFAULT_MESSAGE

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={self.mode!r})"

    def __call__(self, value: Any) -> list[str]:
        return self.validate(value)

    def validate(self, value: Any) -> list[str]:
        """
        Check ``value`` for duplicates.

        Args:
            value: An iterable, ``None`` or ``""``

        Returns:
            An empty list, or a list holding the violation message

        Raises:
            InvalidArgumentError: If the constraint was reconfigured with an
                unsupported mode or a blank message
            UnexpectedValueError: If ``value`` is not iterable, or strict mode
                meets a resource handle
        """
        self._check_configuration()

        if value is None or (isinstance(value, str) and value == ""):
            return []

        if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Iterable):
            raise UnexpectedValueError.for_type(value, "iterable")

        # Mappings are checked by their values, not their keys
        items = value.values() if isinstance(value, Mapping) else value

        if self.mode == self.MODE_STRICT:
            has_duplicates = self._has_strict_duplicates(items)
        else:
            has_duplicates = self._has_loose_duplicates(items)

        if has_duplicates:
            logger.debug(f"Duplicate values found using {self.mode} comparison")
            return [self.message]
        return []

    def _check_configuration(self) -> None:
        name = type(self).__name__
        if self.mode not in self.MODES:
            raise InvalidArgumentError(
                f'Unsupported constraint {name}.mode parameter value "{self.mode}".'
            )
        if not isinstance(self.message, str) or not mb_trim(self.message):
            raise InvalidArgumentError(f"Empty constraint {name}.message parameter value.")

    @staticmethod
    def _has_strict_duplicates(values: Iterable[Any]) -> bool:
        seen: set[tuple] = set()
        for item in values:
            key = fingerprint(item)
            if key in seen:
                return True
            seen.add(key)
        return False

    @staticmethod
    def _has_loose_duplicates(values: Iterable[Any]) -> bool:
        keys = [loose_key(item) for item in list(values)]
        return len(set(keys)) < len(keys)
