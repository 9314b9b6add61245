"""Circular search over an indexed list."""

from collections.abc import Callable


def wrap_search(count: int, start: int, predicate: Callable[[int], bool]) -> int | None:
    """Find the next index after ``start`` satisfying ``predicate``.

    Scans forward from ``start + 1``, wrapping to 0 past the end, and stops
    on reaching ``start`` again. ``start`` itself is never tested, so a
    search over N items without a match tests exactly N - 1 positions.

    Returns:
        The matching index, or None if nothing else matches.
    """
    if count <= 0:
        return None

    start = max(0, min(start, count - 1))
    i = (start + 1) % count

    while i != start:
        if predicate(i):
            return i
        i = (i + 1) % count

    return None
