"""Inclusion predicate applied to every fetched item."""

from collections.abc import Iterable

from topquestions.fetch.models import Item


class UnansweredFilter:
    """Keeps only items whose is_answered flag is false."""

    def keep(self, item: Item) -> bool:
        """Decide whether an item counts toward the ranking.

        Args:
            item: Item to test.

        Returns:
            True if the item is unresolved.
        """
        return not item.is_answered

    def apply(self, items: Iterable[Item]) -> list[Item]:
        """Apply keep() independently to every item.

        Args:
            items: Items of one page.

        Returns:
            Kept items in their original order.
        """
        return [item for item in items if self.keep(item)]
