import re
from typing import Iterable, Iterator, List, Optional

SEATS_PER_ROW = 10

_LABEL_RE = re.compile(r"^([A-Z]+)([1-9]\d*)$")


def _row_letters(row_index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA (spreadsheet-style for very large halls)."""
    letters = ""
    n = row_index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def _row_index(letters: str) -> int:
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def seat_position(seat_number: int) -> tuple[int, int]:
    """Return (row index from 0, column from 1) of a seat on the 10-wide grid."""
    if seat_number < 1:
        raise ValueError(f"Seat numbers start at 1, got {seat_number}")
    return (seat_number - 1) // SEATS_PER_ROW, (seat_number - 1) % SEATS_PER_ROW + 1


def seat_label(seat_number: int) -> str:
    """Human-readable seat label: 1 -> 'A1', 10 -> 'A10', 25 -> 'C5'."""
    row, col = seat_position(seat_number)
    return f"{_row_letters(row)}{col}"


def parse_seat_label(label: str, total_seats: Optional[int] = None) -> int:
    """Inverse of seat_label. Raises ValueError for malformed or out-of-range labels."""
    match = _LABEL_RE.match(label.strip().upper())
    if not match:
        raise ValueError(f"Malformed seat label: {label!r}")
    col = int(match.group(2))
    if not 1 <= col <= SEATS_PER_ROW:
        raise ValueError(f"Column out of range in seat label: {label!r}")
    number = _row_index(match.group(1)) * SEATS_PER_ROW + col
    if total_seats is not None and number > total_seats:
        raise ValueError(f"Seat {label!r} does not exist in a {total_seats}-seat show")
    return number


def format_seats(seat_numbers: Iterable[int]) -> List[str]:
    """Labels for a set of seats, in ascending seat order."""
    return [seat_label(n) for n in sorted(seat_numbers)]


def seat_grid(total_seats: int) -> Iterator[tuple[str, List[int]]]:
    """Yield (row label, seat numbers) for each row; the last row may be short."""
    for start in range(1, total_seats + 1, SEATS_PER_ROW):
        row, _ = seat_position(start)
        yield _row_letters(row), list(range(start, min(start + SEATS_PER_ROW, total_seats + 1)))
