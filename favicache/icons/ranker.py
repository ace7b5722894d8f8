"""Priority ranking for icon candidates.

Lower priority numbers are preferred. Icons declaring a square size come first,
ordered by how well the size fits a small favicon slot; icons without a size
fall back to their file extension; icons declaring a non-square size come last.
"""

import re
from typing import Callable, Optional

from favicache.icons.models import IconCandidate

SIZES_PATTERN: re.Pattern = re.compile(r"(\d+)\D+(\d+)")

# Dimensions are parsed as unsigned 16-bit values; anything larger counts as undeclared.
MAX_DIMENSION: int = 0xFFFF

NON_SQUARE_PRIORITY: int = 200

# Ordered (condition on the square side length, priority) rules. First match wins.
SQUARE_SIZE_PRIORITIES: list[tuple[Callable[[int], bool], int]] = [
    (lambda side: side == 32, 1),
    (lambda side: side == 64, 2),
    (lambda side: 24 <= side <= 128, 3),
    (lambda side: side == 16, 4),
]
OTHER_SQUARE_PRIORITY: int = 5

# Ordered (href suffixes, priority) rules for icons without a declared size.
EXTENSION_PRIORITIES: list[tuple[tuple[str, ...], int]] = [
    ((".png",), 10),
    ((".jpg", ".jpeg"), 20),
]
OTHER_EXTENSION_PRIORITY: int = 30


def _parse_dimension(value: str) -> int:
    dimension = int(value)
    return dimension if dimension <= MAX_DIMENSION else 0


def parse_sizes(sizes: Optional[str]) -> tuple[int, int]:
    """Extract `(width, height)` from a `sizes` attribute such as `32x32`.

    Returns `(0, 0)` when the value doesn't hold two numbers.
    """
    if not sizes:
        return 0, 0

    match = SIZES_PATTERN.search(sizes.strip())
    if match is None:
        return 0, 0

    return _parse_dimension(match.group(1)), _parse_dimension(match.group(2))


def get_icon_priority(href: str, sizes: Optional[str] = None) -> int:
    """Return the priority of an icon from its declared size, or its extension."""
    width, height = parse_sizes(sizes)

    if width and height:
        if width != height:
            return NON_SQUARE_PRIORITY
        for matches, priority in SQUARE_SIZE_PRIORITIES:
            if matches(width):
                return priority
        return OTHER_SQUARE_PRIORITY

    for suffixes, priority in EXTENSION_PRIORITIES:
        if href.endswith(suffixes):
            return priority
    return OTHER_EXTENSION_PRIORITY


def rank_candidates(candidates: list[IconCandidate]) -> list[IconCandidate]:
    """Sort candidates by ascending priority, keeping discovery order for ties."""
    return sorted(candidates, key=lambda candidate: candidate.priority)
