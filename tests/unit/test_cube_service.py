"""Unit tests for cube dependency resolution."""

from __future__ import annotations

from policywizard.models.policy import Cube
from policywizard.service.cube_service import DependentCubes, find_cubes_using_outputs


def _cube(name: str, *fields: str) -> Cube:
    return Cube.model_validate({"name": name, "dimensions": [{"field": f} for f in fields]})


class TestFindCubesUsingOutputs:
    def test_matches_any_dimension(self) -> None:
        cubes = [_cube("c1", "any", "another"), _cube("c2", "product", "any")]
        found = find_cubes_using_outputs(cubes, ["product", "price"])
        assert found == DependentCubes(names=["c2"], positions=[1])

    def test_preserves_scan_order(self) -> None:
        cubes = [
            _cube("c1", "price"),
            _cube("c2", "other"),
            _cube("c3", "product"),
            _cube("c4", "price", "product"),
        ]
        found = find_cubes_using_outputs(cubes, ["product", "price"])
        assert found.names == ["c1", "c3", "c4"]
        assert found.positions == [0, 2, 3]

    def test_cube_matched_once_even_with_several_dimensions(self) -> None:
        found = find_cubes_using_outputs([_cube("c1", "a", "b")], ["a", "b"])
        assert found.positions == [0]

    def test_no_match_gives_empty_lists(self) -> None:
        found = find_cubes_using_outputs([_cube("c1", "x")], ["a"])
        assert found.names == []
        assert found.positions == []
        assert not found

    def test_model_without_outputs_matches_nothing(self) -> None:
        assert not find_cubes_using_outputs([_cube("c1", "x")], [])

    def test_cube_without_dimensions(self) -> None:
        assert not find_cubes_using_outputs([Cube(name="empty")], ["a"])

    def test_empty_cube_list(self) -> None:
        assert find_cubes_using_outputs([], ["a"]) == DependentCubes()
