"""Bounded top-K merge of ranked items."""

import heapq
from collections.abc import Iterable, Sequence

from topquestions.fetch.models import Item
from topquestions.ranker.constants import TOP_K


def rank_key(item: Item) -> tuple[int, int]:
    """Sort key: view_count descending, then question_id ascending.

    Args:
        item: Item to rank.

    Returns:
        Tuple usable as an ascending sort key.
    """
    return (-item.view_count, item.question_id)


class TopKMerger:
    """Maintains the K highest-view items seen so far.

    Ties on view_count are broken by question_id ascending so the
    result is deterministic.
    """

    def __init__(self, k: int = TOP_K) -> None:
        """Initialize the merger.

        Args:
            k: Capacity of the top-K set.
        """
        if k < 1:
            msg = f"k must be at least 1, got {k}"
            raise ValueError(msg)
        self._k = k

    @property
    def k(self) -> int:
        """Get the capacity of the top-K set."""
        return self._k

    def merge(
        self,
        current: Sequence[Item],
        new_items: Iterable[Item],
    ) -> tuple[Item, ...]:
        """Combine the current top-K with newly kept items.

        Equivalent to sorting the concatenation by rank_key and keeping
        the first K elements.

        Args:
            current: Current top-K set.
            new_items: Filtered items of the latest page.

        Returns:
            New top-K set, at most K items, best first.
        """
        candidates = [*current, *new_items]
        return tuple(heapq.nsmallest(self._k, candidates, key=rank_key))
