"""Unit tests for the policy document models."""

from __future__ import annotations

from policywizard.models.policy import Cube, CubeDimension, Model, Policy


class TestModel:
    def test_aliases(self, fake_model: Model) -> None:
        assert fake_model.input_field == "_attachment_body"
        assert fake_model.output_fields == ["product", "price", "timestamp"]
        assert fake_model.configuration["morphline"]["id"] == "morphline1"

    def test_populate_by_name(self) -> None:
        model = Model(name="m", output_fields=["a"])
        assert model.output_fields == ["a"]

    def test_dump_by_alias(self) -> None:
        dumped = Model(name="m", output_fields=["a"]).model_dump(by_alias=True)
        assert dumped["outputFields"] == ["a"]
        assert dumped["autoGeneratedDateTime"] is False

    def test_defaults_are_not_shared(self) -> None:
        a, b = Model(), Model()
        a.output_fields.append("x")
        assert b.output_fields == []


class TestCube:
    def test_uses_any(self) -> None:
        cube = Cube(name="c", dimensions=[CubeDimension(field="a"), CubeDimension(field="b")])
        assert cube.uses_any(["b", "z"])
        assert not cube.uses_any(["z"])
        assert not cube.uses_any([])


class TestPolicy:
    def test_fixture(self, fake_policy: Policy) -> None:
        assert fake_policy.name == "sales-policy"
        assert fake_policy.transformations == []
        assert fake_policy.cubes == []

    def test_nested_validation(self) -> None:
        policy = Policy.model_validate(
            {
                "name": "p",
                "transformations": [{"name": "m", "type": "Morphlines", "outputFields": ["a"]}],
                "cubes": [{"name": "c", "dimensions": [{"name": "d", "field": "a"}]}],
            }
        )
        assert isinstance(policy.transformations[0], Model)
        assert policy.cubes[0].dimensions[0].field == "a"
