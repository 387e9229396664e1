"""Display ordering for scanned entries.

With size sorting enabled, larger entries come first; equal sizes (or
size sorting disabled) fall back to a locale-aware comparison of the
display path, so the order is always total and deterministic.
"""

import locale
from collections.abc import Iterable
from functools import cmp_to_key

from dirwalk.filesystem.models import Entry


def compare_entries(a: Entry, b: Entry, *, sort_by_size: bool = False) -> int:
    """Three-way comparison of two entries.

    Args:
        a: First entry.
        b: Second entry.
        sort_by_size: If True, order larger entries first.

    Returns:
        Negative if a sorts before b, positive if after, 0 if equal.
    """
    if sort_by_size and a.size != b.size:
        return -1 if a.size > b.size else 1
    result = locale.strcoll(a.display_path, b.display_path)
    if result == 0 and a.display_path != b.display_path:
        # Collation can tie distinct strings; keep the order total.
        return -1 if a.display_path < b.display_path else 1
    return result


def sort_entries(entries: Iterable[Entry], *, sort_by_size: bool = False) -> list[Entry]:
    """Return a new list of entries in display order."""
    return sorted(
        entries,
        key=cmp_to_key(lambda a, b: compare_entries(a, b, sort_by_size=sort_by_size)),
    )
