""" Response envelopes: the value-or-error boxes every operation delivers.

An envelope is created when an operation completes and never changes
afterwards. Demanding the value of a failed envelope re-raises the
captured exception, in whatever thread makes the demand; nothing is
raised until then. Asynchronous callbacks and the completion queue
receive an :class:`Event`, which pairs an envelope with the session the
operation ran on.
"""


class Response:
    """ Base class for the two envelope types. The :attr:`ready` attribute
        is always True for an envelope; compare :class:`NotReady`.
    """

    ready = True
    failed = False
    error = None

    def get(self):
        raise NotImplementedError('Response subclasses must implement get()')


# end of class Response



class SuccessResponse(Response):
    """ An envelope holding the *value* an operation produced.
    """

    def __init__(self, value):
        self._value = value


    def __repr__(self):
        return 'SuccessResponse(' + repr(self._value) + ')'


    def get(self):
        return self._value


# end of class SuccessResponse



class ExceptionResponse(Response):
    """ An envelope holding the exception an operation failed with. Calling
        :func:`get` raises it.
    """

    failed = True

    def __init__(self, error):
        self.error = error


    def __repr__(self):
        return 'ExceptionResponse(' + repr(self.error) + ')'


    def get(self):
        raise self.error


# end of class ExceptionResponse



class NotReady:
    """ Returned by :func:`bulkwalk.walker.AsyncWalker.next` when the walker
        has no row available without fetching more of the table. The caller
        invokes the *resume* operation (usually the walker itself) and tries
        again once that invocation has delivered its envelope.
    """

    ready = False
    failed = False
    error = None

    def __init__(self, resume):
        self.resume = resume


    def __repr__(self):
        return 'NotReady(' + repr(self.resume) + ')'


    def get(self):
        raise RuntimeError('no value is available yet; invoke the resume operation first')


# end of class NotReady



class Event:
    """ What a completion callback receives: the *session* the operation
        ran on, and the *response* envelope it produced.
    """

    def __init__(self, session, response):
        self.session = session
        self.response = response


    def __repr__(self):
        return 'Event(' + repr(self.response) + ')'


    @property
    def failed(self):
        return self.response.failed


    def get(self):
        return self.response.get()


# end of class Event


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
