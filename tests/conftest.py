"""Shared test fixtures for the policy wizard."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from policywizard.models.policy import Cube, Model, Policy
from policywizard.service.collaborators import ModelContext
from policywizard.service.model_service import ModelService
from policywizard.service.session_manager import SessionManager

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load_json(name: str) -> dict:
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


@pytest.fixture
def fake_model() -> Model:
    """The transformation fixture as a Model."""
    return Model.model_validate(_load_json("transformation.json"))


@pytest.fixture
def fake_policy() -> Policy:
    """The policy fixture (no transformations, no cubes)."""
    return Policy.model_validate(_load_json("policy.json"))


@pytest.fixture
def factory(fake_model: Model) -> MagicMock:
    """Model factory double returning the transformation fixture."""
    mock = MagicMock(name="ModelFactory")
    mock.get_model.return_value = fake_model
    mock.get_context.return_value = ModelContext(position=0)
    mock.is_valid_model.return_value = True
    mock.is_auto_generated_date_time.return_value = False
    return mock


@pytest.fixture
def modal() -> MagicMock:
    """Modal double whose dialogs are confirmed immediately."""

    async def confirmed() -> None:
        return None

    mock = MagicMock(name="ModalService")
    mock.open_modal.side_effect = lambda *args: MagicMock(result=confirmed())
    return mock


@pytest.fixture
def translator() -> MagicMock:
    mock = MagicMock(name="Translator")
    mock.instant.side_effect = lambda key, params=None: key
    return mock


@pytest.fixture
def array_utils() -> MagicMock:
    return MagicMock(name="ArrayUtils")


@pytest.fixture
def service(
    fake_policy: Policy,
    factory: MagicMock,
    modal: MagicMock,
    translator: MagicMock,
    array_utils: MagicMock,
) -> ModelService:
    return ModelService(fake_policy, factory, modal, translator, array_utils)


@pytest.fixture
def cube_without_output() -> Cube:
    return Cube.model_validate(
        {"name": "cube-any", "dimensions": [{"field": "any"}, {"field": "another"}]}
    )


@pytest.fixture
def cube_with_output(fake_model: Model) -> Cube:
    return Cube.model_validate(
        {
            "name": "cube-by-product",
            "dimensions": [{"field": fake_model.output_fields[0]}, {"field": "any"}],
        }
    )


@pytest.fixture
def session_manager() -> SessionManager:
    """SessionManager with long TTL and no cleanup thread (for tests)."""
    return SessionManager(ttl_seconds=3600, cleanup_interval=9999)
