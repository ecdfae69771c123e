"""ZeroMQ protocol engine and agent server."""

from . import request
