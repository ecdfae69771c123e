""" Python implementation of bulkwalk: row-at-a-time walking of remote
    tables through bulk fetches, on top of a request layer that adds
    timeouts, retries, and completion queues to a bare asynchronous
    protocol engine.
"""

# Utility components.

from . import json
from . import errors
from . import config
home = config.directory

# Submodules used by multiple other components.

from . import protocol
from . import response
from . import runtime
from . import catalog
from . import agent
from . import transport

# Primary public-facing interfaces.

from . import timed
from . import operation
from . import walker
from . import completion
from . import session

from .runtime import Runtime
from .session import Session
from .catalog import Catalog
from .agent import Agent
from .completion import CompletionQueue
from .config import TargetConfig

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
