"""Order-preserving encoding of tree paths.

Each path component is a non-negative integer packed into a variable-width
base-32 string. The root node's path is the empty string; every other path is
the concatenation of its components from the root downwards:

                       ""
                       |
                 +-----+-----+
                "0"         "1"
                 |
            +----+----+
           "00"      "01"

Given that 'x' is a symbol 0-9 or A-V (values 0 to 31), components are:

    x          =  0 ... 2^5
    Wxx        =  2^5 ... 2^10
    Xxxxx      =  2^10 ... 2^20
    Yxxxxxx    =  2^20 ... 2^30
    Zxxxxxxxx  =  2^30 ... 2^40

Within a width class zero-padded digits sort like their numeric values, and
the leading symbols `0-9A-V < W < X < Y < Z` sort like the class ranges, so
string order equals numeric order. Because every marker fixes the width of
what follows, a path splits into components without separators.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pathtree.core.exceptions import CorruptPathError, RangeError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Digit symbols in value order; upper case only so that case-insensitive
# LIKE and collations behave the same as case-sensitive ones.
ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUV"
BASE = len(ALPHABET)

# Marker symbol -> digit count of the component it introduces
MARKERS: dict[str, int] = {"W": 2, "X": 4, "Y": 6, "Z": 8}

# Exclusive upper bound of each width class, paired with its marker
_CLASSES: tuple[tuple[int, str, int], ...] = (
    (1 << 5, "", 1),
    (1 << 10, "W", 2),
    (1 << 20, "X", 4),
    (1 << 30, "Y", 6),
    (1 << 40, "Z", 8),
)

MAX_COMPONENT = 1 << 40

COMPONENT_PATTERN = re.compile(
    r"[0-9A-V]|W[0-9A-V]{2}|X[0-9A-V]{4}|Y[0-9A-V]{6}|Z[0-9A-V]{8}"
)
PATH_PATTERN = re.compile(rf"(?:{COMPONENT_PATTERN.pattern})*")

_DIGIT_VALUES = {symbol: value for value, symbol in enumerate(ALPHABET)}


def _to_base32(n: int, width: int) -> str:
    digits: list[str] = []
    while n:
        n, rem = divmod(n, BASE)
        digits.append(ALPHABET[rem])
    return "".join(reversed(digits)).rjust(width, "0")


def encode_component(n: int) -> str:
    """Encode a child sequence number as a path component.

    Args:
        n: Sequence number, 0 <= n < 2**40

    Returns:
        Encoded component string

    Raises:
        RangeError: If n is negative, too large, or not an integer

    Example:
        >>> encode_component(31)
        'V'
        >>> encode_component(32)
        'W10'
        >>> encode_component(10_000_000)
        'Y09H5K0'
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise RangeError(n)
    for limit, marker, width in _CLASSES:
        if n < limit:
            return marker + _to_base32(n, width)
    raise RangeError(n)


def decode_component(component: str) -> int:
    """Decode a single path component back to its sequence number.

    Args:
        component: One encoded component, e.g. "W10"

    Returns:
        The integer it encodes

    Raises:
        CorruptPathError: If the string is not exactly one component
    """
    if not COMPONENT_PATTERN.fullmatch(component):
        raise CorruptPathError(component, "not a single path component")
    digits = component[1:] if component[0] in MARKERS else component
    value = 0
    for symbol in digits:
        value = value * BASE + _DIGIT_VALUES[symbol]
    return value


def scan_components(path: str) -> list[str]:
    """Find every well-formed component in a path.

    Lenient: symbols that do not form a component are skipped, so a corrupt
    path yields a component list that does not join back to it. Use
    split_path() where corruption must surface as an error.

    Example:
        >>> scan_components("0CW124")
        ['0', 'C', 'W12', '4']
    """
    return COMPONENT_PATTERN.findall(path)


def split_path(path: str) -> list[str]:
    """Split a path into its components.

    Args:
        path: Stored path string ("" for the root)

    Returns:
        Components from the root downwards

    Raises:
        CorruptPathError: If the path does not match the component grammar
    """
    if not PATH_PATTERN.fullmatch(path):
        raise CorruptPathError(path)
    return COMPONENT_PATTERN.findall(path)


def join_path(components: Iterable[str]) -> str:
    """Concatenate components into a path."""
    return "".join(components)


def decode_path(path: str) -> list[int]:
    """Decode a path into its sequence numbers.

    Example:
        >>> decode_path("0W10")
        [0, 32]
    """
    return [decode_component(c) for c in split_path(path)]


def encode_path(numbers: Iterable[int]) -> str:
    """Encode a sequence of child numbers as a path."""
    return "".join(encode_component(n) for n in numbers)


def is_valid_path(path: str) -> bool:
    """Check that a path re-joins exactly from its components.

    Never raises; detects corruption and tampering of stored paths.
    """
    return join_path(scan_components(path)) == path


def path_level(path: str) -> int:
    """Depth of a path (0 for the root)."""
    return len(split_path(path))


def is_root_path(path: str) -> bool:
    """Whether a path denotes a partition root."""
    return not split_path(path)


def parent_path(path: str) -> str | None:
    """Path of the parent node, or None for the root.

    Example:
        >>> parent_path("0CW12")
        '0C'
        >>> parent_path("") is None
        True
    """
    components = split_path(path)
    if not components:
        return None
    return join_path(components[:-1])


__all__ = [
    "ALPHABET",
    "BASE",
    "COMPONENT_PATTERN",
    "MARKERS",
    "MAX_COMPONENT",
    "PATH_PATTERN",
    "decode_component",
    "decode_path",
    "encode_component",
    "encode_path",
    "is_root_path",
    "is_valid_path",
    "join_path",
    "parent_path",
    "path_level",
    "scan_components",
    "split_path",
]
