"""
Text utilities.

Multibyte-aware trimming used both by the blank-value check and by the
normalization applied to textual attributes before persistence.
"""

# Code points removed from both ends of a value: ASCII whitespace, NUL and
# the Unicode space separators.
_TRIM_CODE_POINTS = (
    0x20, 0x0C, 0x0A, 0x0D, 0x09, 0x0B, 0x00,
    0xA0,  # no-break space
    0x1680,  # ogham space mark
    *range(0x2000, 0x200B),  # en quad .. hair space
    0x2028, 0x2029,  # line and paragraph separators
    0x202F,  # narrow no-break space
    0x205F,  # medium mathematical space
    0x3000,  # ideographic space
    0x85,  # next line
    0x180E,  # mongolian vowel separator
)

MB_TRIM_CHARACTERS = "".join(chr(code) for code in _TRIM_CODE_POINTS)


def mb_trim(value: str, characters: str = MB_TRIM_CHARACTERS) -> str:
    """
    Strip ``characters`` from both ends of ``value``.

    Args:
        value: The text to trim
        characters: Characters to strip, defaults to Unicode whitespace

    Returns:
        The trimmed text
    """
    return value.strip(characters)
