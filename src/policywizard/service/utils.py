"""List helpers shared by the wizard services."""

from __future__ import annotations

from typing import Any


class ArrayHelper:
    """Default array-mutation collaborator."""

    def remove_items_from_array(self, items: list[Any], positions: list[int]) -> None:
        remove_items_from_array(items, positions)


def remove_items_from_array(items: list[Any], positions: list[int]) -> None:
    """Remove the elements at *positions* from *items* in place.

    Positions refer to the list as it was before the call, so they are
    removed from the highest down.  Duplicates and positions outside the list
    are ignored.
    """
    for position in sorted(set(positions), reverse=True):
        if 0 <= position < len(items):
            del items[position]
