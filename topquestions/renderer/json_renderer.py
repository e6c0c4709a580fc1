"""JSON rendering of the final top-K set."""

import json
from collections.abc import Iterable

from topquestions.fetch.models import Item


def render_items(items: Iterable[Item], indent: int | None = None) -> str:
    """Serialize items as a JSON array.

    is_answered is only present on items where it is true.

    Args:
        items: Ranked items, best first.
        indent: Optional indentation for pretty output.

    Returns:
        JSON array string.
    """
    return json.dumps([item.to_output() for item in items], indent=indent)
