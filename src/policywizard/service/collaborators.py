"""Capability interfaces for the wizard's external collaborators.

The coordinator only talks to the model factory, the modal dialog, the
translator and the array-mutation helper through the protocols below, so each
can be replaced by a test double or a UI-specific implementation.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from policywizard.models.policy import Model


class ConfirmationCancelled(Exception):
    """Raised through a modal result when the user dismisses the dialog."""


@dataclass(frozen=True)
class ModelContext:
    """Position of the model slot currently being edited in the wizard."""

    position: int


@dataclass(frozen=True)
class ConfirmRequest:
    """Content passed to the confirmation dialog."""

    title: str
    message: str


@dataclass
class ModalHandle:
    """An opened dialog.  ``result`` completes on confirm and raises on dismiss."""

    result: Awaitable[Any]


class ModelFactory(Protocol):
    def get_model(self) -> Model: ...

    def is_valid_model(self) -> bool: ...

    def is_auto_generated_date_time(self) -> bool: ...

    def get_context(self) -> ModelContext: ...

    def reset_model(self, position: int) -> None: ...


class ModalService(Protocol):
    def open_modal(
        self, controller: str, template_url: str, resolve: ConfirmRequest
    ) -> ModalHandle: ...


class Translator(Protocol):
    def instant(self, key: str, params: Mapping[str, str] | None = None) -> str: ...


class ArrayUtils(Protocol):
    def remove_items_from_array(self, items: list[Any], positions: list[int]) -> None: ...


@dataclass
class _OpenedModal:
    controller: str
    template_url: str
    resolve: ConfirmRequest
    future: asyncio.Future[None]


@dataclass
class DeferredModal:
    """Modal service whose dialogs stay open until :meth:`confirm` or :meth:`dismiss`.

    Must be used from inside a running event loop; every dialog result is an
    ``asyncio.Future`` bound to that loop.  ``opened`` only holds dialogs that
    are still waiting for the user; answered or cancelled ones are dropped.
    """

    opened: list[_OpenedModal] = field(default_factory=list)

    def open_modal(
        self, controller: str, template_url: str, resolve: ConfirmRequest
    ) -> ModalHandle:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._prune()
        self.opened.append(_OpenedModal(controller, template_url, resolve, future))
        return ModalHandle(result=future)

    @property
    def current(self) -> _OpenedModal | None:
        """The most recently opened dialog that is still waiting for the user."""
        self._prune()
        return self.opened[-1] if self.opened else None

    def confirm(self) -> None:
        modal = self._require_current()
        modal.future.set_result(None)
        self._prune()

    def dismiss(self) -> None:
        modal = self._require_current()
        modal.future.set_exception(ConfirmationCancelled("Dialog dismissed"))
        self._prune()

    def _prune(self) -> None:
        self.opened = [m for m in self.opened if not m.future.done()]

    def _require_current(self) -> _OpenedModal:
        modal = self.current
        if modal is None:
            raise RuntimeError("No confirmation dialog is open")
        return modal
