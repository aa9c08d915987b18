"""Model step coordinator — adds models to a policy and removes them with their dependent cubes.

Removal is a two-phase protocol::

    pending = service.resolve_dependents(position)    # RESOLVING -> AWAITING_CONFIRMATION
    ...ask the user...
    service.commit(pending)  or  service.abort(pending)  # -> COMMITTED | ABORTED

:meth:`ModelService.remove_model` runs both phases around the modal dialog.
Nothing is mutated before the user confirms.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from policywizard.models.policy import Model, Policy
from policywizard.service.collaborators import (
    ArrayUtils,
    ConfirmationCancelled,
    ConfirmRequest,
    ModalService,
    ModelFactory,
    Translator,
)
from policywizard.service.cube_service import DependentCubes, find_cubes_using_outputs
from policywizard.service.utils import ArrayHelper

logger = logging.getLogger("policywizard.service")

CONFIRM_MODAL_CONTROLLER = "ConfirmModalCtrl"
CONFIRM_MODAL_TEMPLATE = "templates/modal/confirm-modal.tpl.html"
REMOVE_MODEL_TITLE_KEY = "_REMOVE_MODEL_CONFIRM_TITLE_"
REMOVE_MODEL_MESSAGE_KEY = "_REMOVE_MODEL_MESSAGE_"


class ModelNotFoundError(IndexError):
    """Raised when a removal targets a position with no transformation."""


class StaleRemovalError(RuntimeError):
    """Raised when a pending removal no longer matches the policy."""


class RemovalState(StrEnum):
    RESOLVING = "resolving"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTED = "committed"
    ABORTED = "aborted"


class RemovalOutcome(StrEnum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class PendingRemoval:
    """A model removal waiting for the user's decision."""

    position: int
    model: Model
    dependents: DependentCubes
    state: RemovalState = RemovalState.RESOLVING


class ModelService:
    """Owns a :class:`Policy` handle and coordinates the wizard's model step.

    All collaborators are injected; ``array_utils`` defaults to the in-place
    :class:`ArrayHelper`.
    """

    def __init__(
        self,
        policy: Policy,
        factory: ModelFactory,
        modal: ModalService,
        translator: Translator,
        array_utils: ArrayUtils | None = None,
        *,
        confirm_template: str = CONFIRM_MODAL_TEMPLATE,
    ) -> None:
        self._policy = policy
        self._factory = factory
        self._modal = modal
        self._translator = translator
        self._array_utils = array_utils if array_utils is not None else ArrayHelper()
        self._confirm_template = confirm_template
        self._model_creation_panel_active = False
        self._pending: PendingRemoval | None = None

    @property
    def policy(self) -> Policy:
        return self._policy

    # -- model lifecycle -----------------------------------------------------

    def add_model(self) -> Model | None:
        """Append the factory's draft to the policy if it is valid.

        An invalid draft is rejected silently: the policy is left untouched and
        ``None`` is returned.
        """
        candidate = self._factory.get_model().model_copy(deep=True)
        if not self._factory.is_valid_model():
            logger.debug("Rejected invalid model draft '%s'", candidate.name)
            return None

        transformations = self._policy.transformations
        candidate.order = len(transformations)
        candidate.auto_generated_date_time = self._factory.is_auto_generated_date_time()
        transformations.append(candidate)
        self._factory.reset_model(len(transformations))
        logger.info("Added model '%s' at order %d", candidate.name, candidate.order)
        return candidate

    def is_last_model(self, position: int) -> bool:
        """True for the position of the final model; always false on an empty policy."""
        count = len(self._policy.transformations)
        return count > 0 and position == count - 1

    def is_new_model(self, position: int) -> bool:
        """True only for the slot just past the last model (the one being created)."""
        return position == len(self._policy.transformations)

    def activate_model_creation_panel(self) -> None:
        self._model_creation_panel_active = True

    def deactivate_model_creation_panel(self) -> None:
        self._model_creation_panel_active = False

    def is_active_model_creation_panel(self) -> bool:
        return self._model_creation_panel_active

    # -- dependency resolution -----------------------------------------------

    def find_dependent_cubes(self, model: Model) -> DependentCubes:
        return find_cubes_using_outputs(self._policy.cubes, model.output_fields)

    # -- confirmation --------------------------------------------------------

    def build_confirm_request(self, cube_names: list[str] | None = None) -> ConfirmRequest:
        """Dialog content for removing a model used by *cube_names*.

        The message is empty, and no translation is requested, when no cube
        depends on the model.
        """
        message = ""
        if cube_names:
            message = self._translator.instant(
                REMOVE_MODEL_MESSAGE_KEY, {"modelList": ",".join(cube_names)}
            )
        return ConfirmRequest(title=REMOVE_MODEL_TITLE_KEY, message=message)

    def show_confirm_remove_model(self, cube_names: list[str] | None = None) -> Awaitable[Any]:
        """Open the confirmation dialog and return its result awaitable."""
        handle = self._modal.open_modal(
            CONFIRM_MODAL_CONTROLLER,
            self._confirm_template,
            self.build_confirm_request(cube_names),
        )
        return handle.result

    # -- removal -------------------------------------------------------------

    @property
    def pending_removal(self) -> PendingRemoval | None:
        """The removal currently waiting for confirmation, if any."""
        return self._pending

    def resolve_dependents(self, position: int = 0) -> PendingRemoval:
        """First phase: find the model at *position* and the cubes that depend on it.

        Only one removal waits for confirmation at a time; resolving a new one
        aborts the previous one, since its cube positions would go stale.
        """
        transformations = self._policy.transformations
        if not 0 <= position < len(transformations):
            raise ModelNotFoundError(
                f"No model at position {position} (policy has {len(transformations)})"
            )
        model = transformations[position]
        pending = PendingRemoval(position=position, model=model, dependents=DependentCubes())
        pending.dependents = self.find_dependent_cubes(model)
        if self._pending is not None:
            self.abort(self._pending)
        pending.state = RemovalState.AWAITING_CONFIRMATION
        self._pending = pending
        if pending.dependents:
            logger.debug(
                "Model '%s' is used by %d cube(s): %s",
                model.name, len(pending.dependents.positions), pending.dependents.names,
            )
        else:
            logger.debug("Model '%s' is not used by any cube", model.name)
        return pending

    def commit(self, pending: PendingRemoval) -> None:
        """Second phase on confirmation: detach the model and prune its dependent cubes."""
        if pending.state is not RemovalState.AWAITING_CONFIRMATION:
            raise StaleRemovalError(f"Removal is already {pending.state.value}")
        transformations = self._policy.transformations
        if (
            pending.position >= len(transformations)
            or transformations[pending.position] is not pending.model
        ):
            raise StaleRemovalError(
                f"Model '{pending.model.name}' is no longer at position {pending.position}"
            )

        del transformations[pending.position]
        self._array_utils.remove_items_from_array(
            self._policy.cubes, pending.dependents.positions
        )
        self._factory.reset_model(len(transformations))
        pending.state = RemovalState.COMMITTED
        self._release(pending)
        logger.info(
            "Removed model '%s' and %d dependent cube(s)",
            pending.model.name, len(pending.dependents.positions),
        )

    def abort(self, pending: PendingRemoval) -> None:
        """Second phase on cancellation: drop the removal without touching the policy."""
        if pending.state is RemovalState.AWAITING_CONFIRMATION:
            pending.state = RemovalState.ABORTED
            logger.info("Removal of model '%s' cancelled", pending.model.name)
        self._release(pending)

    def _release(self, pending: PendingRemoval) -> None:
        if self._pending is pending:
            self._pending = None

    async def remove_model(self, position: int = 0) -> RemovalOutcome:
        """Ask for confirmation, then remove the model at *position* and its dependent cubes.

        A dismissed or abandoned dialog leaves the policy unchanged and yields
        :attr:`RemovalOutcome.CANCELLED`, as does a confirmation arriving after
        a newer removal replaced this one.  Cancelling the calling task also
        leaves the policy unchanged and propagates the cancellation.
        """
        pending = self.resolve_dependents(position)
        try:
            await self.show_confirm_remove_model(pending.dependents.names)
        except ConfirmationCancelled:
            self.abort(pending)
            return RemovalOutcome.CANCELLED
        except asyncio.CancelledError:
            self.abort(pending)
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # The caller is cancelling us, not the dialog.
                raise
            return RemovalOutcome.CANCELLED
        if pending.state is RemovalState.ABORTED:
            logger.info("Ignoring confirmation for superseded removal of '%s'", pending.model.name)
            return RemovalOutcome.CANCELLED
        self.commit(pending)
        return RemovalOutcome.CONFIRMED
