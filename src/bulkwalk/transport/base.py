"""Protocol engine interface.

This is the (small) contract that engine implementations follow. The
request lifecycle in :mod:`bulkwalk.timed` depends only on this; timeouts
and retries are not the engine's business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable, Optional

from ..errors import EngineError
from ..protocol.message import Pdu


Callback = Callable[[Optional[Pdu], Optional[BaseException]], None]


class Engine(ABC):
    """Minimal contract for a protocol engine."""

    @abstractmethod
    def send(self, pdu: Pdu, destination: Hashable, callback: Callback) -> Any:
        """Send *pdu* to *destination* and return a handle for :meth:`cancel`.

        *callback* is called at most once, on the engine's own thread, with
        ``(response, None)`` or ``(None, error)``. It is never called for a
        request that was cancelled first. An :class:`EngineError` raised
        here means the request was not sent.
        """

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Forget an outstanding request; unknown handles are ignored."""

    @abstractmethod
    def close(self) -> None:
        """Stop the engine; outstanding requests fail with EngineError."""

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, *args) -> None:
        self.close()


__all__ = ("Callback", "Engine", "EngineError")
