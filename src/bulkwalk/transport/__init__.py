"""Protocol engine implementations.

:mod:`.loopback` answers requests in-process from a
:class:`bulkwalk.agent.Agent`; :mod:`.zmq.request` talks to remote agents
over ZeroMQ.
"""

from ..errors import EngineError
from .base import Engine
from . import loopback
from .zmq import request
