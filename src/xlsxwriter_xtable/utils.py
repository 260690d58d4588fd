import re
from numbers import Real
from typing import Any, Optional, Tuple
from warnings import warn

# A..ZZ, two letters at most
MAX_LABELED_COLUMN = 26 * 26 + 25

_COORDS_RE = re.compile(r'^\$?([A-Za-z]{1,3})\$?(\d+)$')
_COLOR_RE = re.compile(r'^#?([0-9A-Fa-f]{6})$')


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def normalize_span(value: Any, default: int = 1) -> int:
    """Coerce a span or skip count to an integer no smaller than 1, substituting `default` for anything else.

    Examples:
        >>> normalize_span(3)
        3
        >>> normalize_span(0), normalize_span(-2), normalize_span('wide'), normalize_span(None)
        (1, 1, 1, 1)
    """
    if not _is_number(value) or value < 1:
        return default
    return int(value)


def normalize_positive(value: Any):
    """Return `value` if it is a number greater than zero, otherwise None."""
    if _is_number(value) and value > 0:
        return value
    return None


def normalize_index(value: Any, lowest: int) -> int:
    """Coerce a starting row or column to an integer no smaller than `lowest`."""
    if not _is_number(value) or value < lowest:
        return lowest
    return int(value)


def normalize_color(value: Any) -> Optional[str]:
    """Turn an ``RRGGBB`` color, ``#`` prefix allowed, into fully opaque ARGB. Anything else gives None.

    Examples:
        >>> normalize_color('aabbcc'), normalize_color('#00FF00'), normalize_color('red')
        ('FFAABBCC', 'FF00FF00', None)
    """
    if not isinstance(value, str):
        return None

    match = _COLOR_RE.match(value.strip())
    if match is None:
        return None
    return f'FF{match.group(1).upper()}'


def column_to_label(column: int) -> str:
    """Convert a zero-based column number into its letter coordinate.

    Only A..ZZ (0..701) are representable, past that the label stops making sense.

    Examples:
        >>> [column_to_label(c) for c in (0, 25, 26, 51, 701)]
        ['A', 'Z', 'AA', 'AZ', 'ZZ']
    """
    if column > MAX_LABELED_COLUMN:
        warn(f"Column {column} is past ZZ, its label will not be a valid coordinate.")

    first_digit = column // 26
    second_digit = column - first_digit * 26

    label = ''
    if first_digit > 0:
        label += chr(64 + first_digit)

    return label + chr(65 + second_digit)


def label_to_column(label: str) -> int:
    """Convert a letter coordinate back into a zero-based column number.

    Only the first letter is read, so this is the inverse of :func:`column_to_label` for A..Z only.
    """
    return ord(label[0].upper()) - 65


def to_coords(row: int, column: int) -> str:
    """Build a cell coordinate like ``B3`` out of a one-based `row` and a zero-based `column`."""
    return f'{column_to_label(column)}{row}'


def is_coords(coords: Any) -> bool:
    """Whether `coords` is a cell coordinate like ``B3``, labels of columns past ZZ are not."""
    return isinstance(coords, str) and _COORDS_RE.match(coords.strip()) is not None


def to_column_and_row(coords: str) -> Tuple[int, int]:
    """Split a cell coordinate like ``B3`` into zero-based column and one-based row."""
    match = _COORDS_RE.match(coords.strip())
    if match is None:
        raise ValueError(f'{coords!r} is not a cell coordinate')

    letters, digits = match.groups()
    return label_to_column(letters), int(digits)
