"""Message catalog used to render localized wizard messages."""

from __future__ import annotations

import re
from collections.abc import Mapping

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")

DEFAULT_MESSAGES: dict[str, dict[str, str]] = {
    "en-US": {
        "_REMOVE_MODEL_CONFIRM_TITLE_": "Remove model",
        "_REMOVE_MODEL_MESSAGE_": (
            "The following cubes use outputs of this model and will be removed too: "
            "{{modelList}}"
        ),
    },
    "es-ES": {
        "_REMOVE_MODEL_CONFIRM_TITLE_": "Eliminar modelo",
        "_REMOVE_MODEL_MESSAGE_": (
            "Los siguientes cubos usan salidas de este modelo y también serán eliminados: "
            "{{modelList}}"
        ),
    },
}


class MessageCatalog:
    """Looks up message templates by key and interpolates ``{{param}}`` placeholders.

    Unknown keys translate to themselves; unknown placeholders are left as is.
    """

    def __init__(
        self,
        locale: str = "en-US",
        messages: Mapping[str, Mapping[str, str]] | None = None,
    ) -> None:
        catalog = messages if messages is not None else DEFAULT_MESSAGES
        if locale not in catalog:
            raise KeyError(f"No messages for locale '{locale}'")
        self._locale = locale
        self._messages = catalog[locale]

    @property
    def locale(self) -> str:
        return self._locale

    def instant(self, key: str, params: Mapping[str, str] | None = None) -> str:
        template = self._messages.get(key, key)
        if not params:
            return template

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            return str(params[name]) if name in params else match.group(0)

        return _PLACEHOLDER_RE.sub(substitute, template)
