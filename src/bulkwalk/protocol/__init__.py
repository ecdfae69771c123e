"""
bulkwalk protocol model
=======================

The request/response vocabulary shared by the operations layer, the
protocol engines, and the in-memory agent:

* :mod:`.fields`: PDU types, value syntaxes, and error status codes.
* :mod:`.oid`: addresses as tuples of integers.
* :mod:`.varbind`: :class:`Varbind` and :class:`VarbindCollection`.
* :mod:`.message`: the :class:`Pdu`.

Nothing here depends on a protocol engine; the engines depend on this.
"""

from . import fields
from . import oid
from . import varbind
from . import message

from .varbind import Varbind, VarbindCollection
from .message import Pdu


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
