""" Exceptions raised, or captured in response envelopes, by bulkwalk.

Everything derives from :class:`BulkwalkError` so that callers can catch
library failures as a group. Reaching the end of a table is not an error;
see :mod:`bulkwalk.walker`.
"""

from .protocol import fields


class BulkwalkError(Exception):
    """Base class for all bulkwalk errors."""


class EngineError(BulkwalkError):
    """The protocol engine could not send a request or receive its reply."""


class RequestTimeout(BulkwalkError):
    """No response arrived within the full retry budget of a request."""


class TruncatedResponseError(BulkwalkError):
    """A bulk fetch returned fewer entries than the walk requires."""


class NameNotFoundError(BulkwalkError):
    """The catalog could not resolve an object name to an address."""


class ProtocolStatusError(BulkwalkError):
    """ The remote agent flagged a logical error in its response. The
        *status* is the numeric error status, *index* the one-based
        position of the offending variable binding (zero if the error
        does not apply to a specific binding).
    """

    def __init__(self, status, index=0, status_text=None):

        self.status = int(status)
        self.index = int(index)

        if status_text is None:
            status_text = fields.STATUS_TEXT.get(self.status, 'status ' + str(self.status))

        self.status_text = status_text

        message = 'response indicates %s at index %d' % (status_text, self.index)
        BulkwalkError.__init__(self, message)


# end of class ProtocolStatusError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
