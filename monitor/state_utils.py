from __future__ import annotations

from typing import Iterable, Iterator, Tuple, TypeVar

T = TypeVar('T')

# Tree markers for the grouped (multi-domain) layout
BRANCH_MARKER = '├─'
LAST_MARKER = '└─'


def iter_positions(items: Iterable[T]) -> Iterator[Tuple[int, T, bool]]:
    """Yield (index, item, is_last) for every item, in order."""
    seq = list(items)
    last = len(seq) - 1
    for i, item in enumerate(seq):
        yield i, item, i == last


def tree_marker(is_last: bool) -> str:
    return LAST_MARKER if is_last else BRANCH_MARKER
