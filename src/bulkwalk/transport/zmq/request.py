"""ZeroMQ request/response engine.

Requests travel over DEALER sockets, one per destination ``(hostname,
port)``, to a ROUTER socket on the agent side. All socket traffic for an
:class:`Engine` happens on its own background thread; callers hand
requests over through a queue and an inproc PAIR signal.

The public surface:
    - Engine: a :class:`bulkwalk.transport.base.Engine`
    - Server: the agent side, dispatching to ``req_handler(pdu)``
"""

from __future__ import annotations

import atexit
import concurrent.futures
import logging
import queue
import socket as pysocket
import threading
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

import zmq

from ...errors import EngineError
from ...protocol import fields
from ...protocol.message import Pdu
from .. import base
from .framing import VersionMismatch, from_frames, to_frames

logger = logging.getLogger(__name__)

minimum_port = 10079
maximum_port = 13679
zmq_context = zmq.Context()


class PendingRequest:
    """Engine-side record of one request awaiting its response."""

    def __init__(self, pdu: Pdu, destination: Tuple[str, int], callback: base.Callback):
        self.pdu = pdu
        self.destination = destination
        self.callback = callback

    @property
    def id(self) -> int:
        return self.pdu.id

    def complete(self, response: Optional[Pdu], error: Optional[BaseException]) -> None:
        try:
            self.callback(response, error)
        except Exception:
            logger.exception("completion callback for request %d failed", self.id)


class Engine(base.Engine):
    """Issue requests via ZeroMQ DEALER sockets and receive responses."""

    def __init__(self):
        self._sockets: Dict[Tuple[str, int], zmq.Socket] = {}
        self._pending: Dict[int, PendingRequest] = {}
        self._lock = threading.Lock()

        self._outbox = queue.SimpleQueue()

        internal = f"inproc://bulkwalk.Engine:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        self.shutdown = False
        self._running = True
        self._poller = zmq.Poller()
        self._thread = threading.Thread(target=self.run, name="bulkwalk-zmq-engine", daemon=True)
        self._thread.start()

    def _signal(self, item: Optional[PendingRequest]) -> None:
        self._outbox.put(item)
        with self._signal_lock:
            self._signal_tx.send(b"")

    def _socket(self, destination: Tuple[str, int]) -> zmq.Socket:
        # Only called from the engine thread.
        try:
            return self._sockets[destination]
        except KeyError:
            pass

        hostname, port = destination
        socket = zmq_context.socket(zmq.DEALER)
        socket.setsockopt(zmq.LINGER, 0)
        socket.identity = f"bulkwalk.Engine.{id(self)}.{hostname}:{port}".encode()
        socket.connect(f"tcp://{hostname}:{port}")

        self._sockets[destination] = socket
        self._poller.register(socket, zmq.POLLIN)
        return socket

    def send(self, pdu: Pdu, destination: Hashable, callback: base.Callback) -> PendingRequest:
        try:
            hostname, port = destination
            destination = (str(hostname), int(port))
        except (TypeError, ValueError) as exc:
            raise EngineError(f"destination must be (hostname, port), not {destination!r}") from exc

        pending = PendingRequest(pdu, destination, callback)

        with self._lock:
            if self.shutdown:
                raise EngineError("engine is closed")
            self._pending[pending.id] = pending

        self._signal(pending)
        return pending

    def cancel(self, handle: Any) -> None:
        with self._lock:
            if self._pending.get(handle.id) is handle:
                del self._pending[handle.id]

    def close(self) -> None:
        with self._lock:
            if self.shutdown:
                return
            self.shutdown = True
            pending = list(self._pending.values())
            self._pending.clear()

        self._signal(None)
        self._thread.join()
        self._signal_tx.close()

        for request in pending:
            request.complete(None, EngineError("engine closed"))

    def _handle_outgoing(self) -> None:
        # Clear one signal and send one request.
        self._signal_rx.recv(flags=zmq.NOBLOCK)
        pending: Optional[PendingRequest] = self._outbox.get(block=False)

        if pending is None:
            self._running = False
            return

        with self._lock:
            current = self._pending.get(pending.id) is pending

        if not current:
            # Cancelled before it could be sent.
            return

        try:
            socket = self._socket(pending.destination)
            socket.send_multipart(to_frames(pending.pdu), flags=zmq.NOBLOCK)
        except zmq.ZMQError as exc:
            self.cancel(pending)
            hostname, port = pending.destination
            pending.complete(None, EngineError(f"cannot send to {hostname}:{port}: {exc}"))

    def _handle_incoming(self, parts: Tuple[bytes, ...]) -> None:
        try:
            _prefix, pdu = from_frames(parts)
        except VersionMismatch as exc:
            with self._lock:
                pending = self._pending.pop(exc.id, None)
            if pending is not None:
                pending.complete(None, EngineError(str(exc)))
            return
        except ValueError as exc:
            logger.warning("discarding malformed response: %s", exc)
            return

        with self._lock:
            pending = self._pending.pop(pdu.id, None)

        if pending is None:
            logger.debug("discarding response to unknown or cancelled request %d", pdu.id)
            return

        pending.complete(pdu, None)

    def run(self) -> None:
        poller = self._poller
        poller.register(self._signal_rx, zmq.POLLIN)

        while self._running:
            for active, _flag in poller.poll(10000):
                if active == self._signal_rx:
                    self._handle_outgoing()
                else:
                    parts = tuple(active.recv_multipart())
                    self._handle_incoming(parts)

        for socket in self._sockets.values():
            socket.close()

        self._sockets.clear()
        self._signal_rx.close()


class Server:
    """Receive requests via a ZeroMQ ROUTER socket, respond to them.

    Each request is handed to :meth:`req_handler` on a worker thread. With
    no *handler* and no override of :meth:`req_handler`, requests are
    never answered.
    """

    def __init__(self, handler: Optional[Callable[[Pdu], Optional[Pdu]]] = None,
                 hostname: Optional[str] = None, port: Optional[int] = None,
                 avoid: Optional[set] = None, workers: int = 8):
        self.handler = handler
        self.hostname = hostname or pysocket.getfqdn()
        self.port = int(port) if port is not None else None
        self.avoid = set(avoid or set())

        self.socket = zmq_context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)

        if self.port is None:
            self.port = self._bind_any()
        else:
            try:
                self.socket.bind(f"tcp://{self.hostname}:{self.port}")
            except zmq.ZMQError as exc:
                self.socket.close()
                raise EngineError(f"port already in use: {self.port}") from exc

        # Response queue for thread-safe sending
        self._responses = queue.SimpleQueue()

        internal = f"inproc://bulkwalk.Server:signal:{self.hostname}:{self.port}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        self.shutdown = False
        self.workers = concurrent.futures.ThreadPoolExecutor(max_workers=workers)
        self.thread = threading.Thread(target=self.run, name="bulkwalk-zmq-server", daemon=True)
        self.thread.start()

    @property
    def destination(self) -> Tuple[str, int]:
        return (self.hostname, self.port)

    def _bind_any(self) -> int:
        for port in range(minimum_port, maximum_port + 1):
            if port in self.avoid:
                continue
            try:
                self.socket.bind(f"tcp://{self.hostname}:{port}")
                return port
            except zmq.ZMQError:
                continue
        self.socket.close()
        raise EngineError(
            f"no ports available in range {minimum_port}:{maximum_port}"
        )

    # --- request handling hooks ---
    def req_handler(self, request: Pdu) -> Optional[Pdu]:
        """Override in subclasses, or supply a handler at construction.

        Return:
          - Pdu  -> sent back as the response
          - None -> no response is sent
        """

        if self.handler is None:
            return None
        return self.handler(request)

    def send(self, frames: Optional[Tuple[bytes, ...]]) -> None:
        self._responses.put(frames)
        with self._signal_lock:
            self._signal_tx.send(b"")

    def close(self) -> None:
        if self.shutdown:
            return
        self.shutdown = True
        self.send(None)
        self.thread.join()
        self.workers.shutdown(wait=True)
        self._signal_tx.close()

    # --- internal ---
    def _rep_outgoing(self) -> None:
        self._signal_rx.recv(flags=zmq.NOBLOCK)
        frames = self._responses.get(block=False)
        if frames is None:
            return
        self.socket.send_multipart(frames)

    def _req_incoming(self, parts: Tuple[bytes, ...]) -> None:
        try:
            prefix, request = from_frames(parts)
        except ValueError as exc:
            logger.warning("discarding malformed request: %s", exc)
            return

        try:
            response = self.req_handler(request)
        except Exception:
            logger.exception("handler failed for request %d", request.id)
            response = request.response(request.varbinds, fields.GEN_ERR, 0)

        if response is None:
            return

        self.send(to_frames(response, prefix))

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(10000):
                if active == self._signal_rx:
                    self._rep_outgoing()
                elif active == self.socket:
                    parts = tuple(self.socket.recv_multipart())
                    self.workers.submit(self._req_incoming, parts)

        self.socket.close()
        self._signal_rx.close()


def _cleanup() -> None:
    try:
        zmq_context.destroy(linger=0)
    except zmq.ZMQError:
        pass


atexit.register(_cleanup)
