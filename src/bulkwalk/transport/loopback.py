"""In-process protocol engine.

Requests are answered by a :class:`bulkwalk.agent.Agent` on the engine's
own dispatch thread, so completions arrive asynchronously exactly as they
would from a network engine. The engine can also misbehave on request:
drop the first few requests, drop every request, or answer late.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
import time
from typing import Any, Dict, Hashable, List, Optional

from ..errors import EngineError
from ..protocol.message import Pdu
from . import base

logger = logging.getLogger(__name__)


class Engine(base.Engine):
    """Deliver requests to *agent*.

    *delay* seconds elapse between sending a request and its answer. The
    first *drop* requests are never answered; with *drop_all* no request
    is. :attr:`sent` counts every request handed to :meth:`send`, and
    :attr:`requests` keeps each of them, in order.
    """

    def __init__(self, agent, delay: float = 0, drop: int = 0, drop_all: bool = False):
        self.agent = agent
        self.delay = float(delay)
        self.drop = int(drop)
        self.drop_all = drop_all

        self.sent = 0
        self.cancelled = 0
        self.requests: List[Pdu] = []

        self._handles = itertools.count(1)
        self._pending: Dict[int, base.Callback] = {}
        self._lock = threading.Lock()
        self._queue: "queue.SimpleQueue[Optional[tuple]]" = queue.SimpleQueue()

        self.shutdown = False
        self._thread = threading.Thread(target=self.run, name="bulkwalk-loopback", daemon=True)
        self._thread.start()

    def send(self, pdu: Pdu, destination: Hashable, callback: base.Callback) -> int:
        with self._lock:
            if self.shutdown:
                raise EngineError("engine is closed")

            handle = next(self._handles)
            self.sent += 1
            self.requests.append(pdu)

            dropped = self.drop_all or self.drop > 0
            if self.drop > 0:
                self.drop -= 1

            if not dropped:
                self._pending[handle] = callback

        if dropped:
            logger.debug("dropping request %d to %s", pdu.id, destination)
        else:
            self._queue.put((time.monotonic() + self.delay, handle, pdu))

        return handle

    def cancel(self, handle: Any) -> None:
        with self._lock:
            if self._pending.pop(handle, None) is not None:
                self.cancelled += 1

    def close(self) -> None:
        with self._lock:
            if self.shutdown:
                return
            self.shutdown = True
            pending = list(self._pending.values())
            self._pending.clear()

        self._queue.put(None)
        self._thread.join()

        for callback in pending:
            callback(None, EngineError("engine closed"))

    def run(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                break

            deadline, handle, pdu = item
            delay = deadline - time.monotonic()
            if delay > 0:
                time.sleep(delay)

            with self._lock:
                callback = self._pending.pop(handle, None)

            if callback is None:
                continue

            try:
                response = self.agent.handle(pdu)
            except Exception as exc:
                logger.exception("agent failed to handle request %d", pdu.id)
                callback(None, EngineError(f"agent failed: {exc}"))
                continue

            try:
                callback(response, None)
            except Exception:
                logger.exception("completion callback for request %d failed", pdu.id)
