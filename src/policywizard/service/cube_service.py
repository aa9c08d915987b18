"""Dependency resolution between models and the cubes that consume their outputs."""

from __future__ import annotations

from dataclasses import dataclass, field

from policywizard.models.policy import Cube


@dataclass(frozen=True)
class DependentCubes:
    """Cubes using a model's outputs, as parallel ``names`` / ``positions`` lists.

    Positions are indices into the cube list at resolution time and are no
    longer valid once that list is mutated.
    """

    names: list[str] = field(default_factory=list)
    positions: list[int] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.positions)


def find_cubes_using_outputs(cubes: list[Cube], output_fields: list[str]) -> DependentCubes:
    """Return every cube with a dimension reading one of *output_fields*, in list order."""
    names: list[str] = []
    positions: list[int] = []
    for position, cube in enumerate(cubes):
        if cube.uses_any(output_fields):
            names.append(cube.name)
            positions.append(position)
    return DependentCubes(names=names, positions=positions)
