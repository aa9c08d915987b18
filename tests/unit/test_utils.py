"""Unit tests for list helpers."""

from __future__ import annotations

from policywizard.service.utils import ArrayHelper, remove_items_from_array


class TestRemoveItemsFromArray:
    def test_removes_positions(self) -> None:
        items = ["a", "b", "c", "d"]
        remove_items_from_array(items, [1, 3])
        assert items == ["a", "c"]

    def test_positions_refer_to_original_list(self) -> None:
        items = ["a", "b", "c"]
        remove_items_from_array(items, [0, 1])
        assert items == ["c"]

    def test_unsorted_and_duplicate_positions(self) -> None:
        items = ["a", "b", "c", "d"]
        remove_items_from_array(items, [2, 0, 2])
        assert items == ["b", "d"]

    def test_out_of_range_positions_ignored(self) -> None:
        items = ["a", "b"]
        remove_items_from_array(items, [5, -1, 1])
        assert items == ["a"]

    def test_no_positions(self) -> None:
        items = ["a"]
        remove_items_from_array(items, [])
        assert items == ["a"]

    def test_helper_mutates_in_place(self) -> None:
        items = [1, 2, 3]
        ArrayHelper().remove_items_from_array(items, [1])
        assert items == [1, 3]
