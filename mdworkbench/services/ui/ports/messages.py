from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IMessageService(Protocol):
    """
    Abstract UI port for Yes/No confirmations. The only blocking surface in
    the app: the caller is suspended until the user answers.
    """

    def ask(self, parent: Any | None, title: str, text: str) -> bool:
        """True for Yes, False for No / dismissed."""
        ...
