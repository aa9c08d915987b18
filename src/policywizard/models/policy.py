"""Policy document types: transformations (models), cubes and their dimensions."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Model(BaseModel):
    """A transformation step producing named output fields.

    ``order`` is a position hint assigned when the model is added to a policy.
    """

    name: str = ""
    type: str = ""
    order: int = 0
    input_field: str | None = Field(None, alias="inputField")
    output_fields: list[str] = Field(default=[], alias="outputFields")
    configuration: dict[str, Any] = {}
    auto_generated_date_time: bool = Field(False, alias="autoGeneratedDateTime")

    model_config = {"populate_by_name": True}


class CubeDimension(BaseModel):
    """A cube dimension reading one field by name."""

    name: str = ""
    field: str
    precision: str | None = None

    model_config = {"populate_by_name": True}


class Cube(BaseModel):
    """An aggregation over fields produced by the policy's models."""

    name: str = ""
    dimensions: list[CubeDimension] = []
    operators: list[dict[str, Any]] = []

    model_config = {"populate_by_name": True}

    def uses_any(self, fields: list[str]) -> bool:
        """True when any dimension reads one of *fields*."""
        wanted = set(fields)
        return any(dim.field in wanted for dim in self.dimensions)


class Policy(BaseModel):
    """Aggregate root holding the ordered transformations and cubes of one wizard session."""

    name: str = ""
    description: str = ""
    transformations: list[Model] = []
    cubes: list[Cube] = []

    model_config = {"populate_by_name": True}
