""" Operations: one protocol exchange each, invoked either blocking or with
    a completion callback. Either way the outcome is a response envelope
    from :mod:`bulkwalk.response`; :func:`Operation.invoke` never raises.
"""

import logging
import threading

from . import errors
from .protocol import fields
from .protocol import Pdu, Varbind
from .response import Event, ExceptionResponse, SuccessResponse

logger = logging.getLogger(__name__)


class Operation:
    """ Base class for an exchange of *type* with the agent behind
        *session*, carrying the request *varbinds*. Subclasses customize
        the request with :func:`create_request` and map the validated
        response to the operation's result with :func:`create_result`.
    """

    type = None

    def __init__(self, session, varbinds):

        self.session = session
        self.varbinds = tuple(varbinds)
        self._request = None


    def __repr__(self):
        names = ', '.join(varbind.name for varbind in self.varbinds)
        return '%s(%s)' % (self.__class__.__name__, names)


    def invoke(self, callback=None):
        """ Run this operation. With no *callback*, block until it is
            complete and return the envelope. With a *callback*, return
            immediately; the callback is later called, on a runtime worker
            thread, with a single :class:`bulkwalk.response.Event`.
        """

        if callback is None:
            return self._invoke()

        self._invoke_async(callback)


    def interrupt(self):
        """ Wake a caller blocked in :func:`invoke` on this operation. The
            outstanding request is cancelled, and the blocked invocation
            returns a :class:`bulkwalk.errors.RequestTimeout` failure.
        """

        request = self._request
        if request is not None:
            request.interrupt()


    def _invoke(self):

        try:
            request = self.session.request(self.create_request())
            self._request = request
            response = request.get()
        except Exception as error:
            return ExceptionResponse(error)

        return self._result(response)


    def _invoke_async(self, callback):

        delivery = Delivery(self.session, callback)

        def completed(response, error):
            delivery(self._finish, response, error)

        try:
            request = self.create_request()
            self.session.request_async(request, completed)
        except Exception as error:
            delivery(self._finish, None, error)


    def _finish(self, response, error):

        if error is not None:
            return ExceptionResponse(error)

        return self._result(response)


    def _result(self, response):

        try:
            self.validate(response)
            result = self.create_result(response)
        except Exception as error:
            return ExceptionResponse(error)

        return SuccessResponse(result)


    def create_request(self):
        """ Return the request :class:`bulkwalk.protocol.Pdu`. The request
            bindings carry only addresses, except for a SET.
        """

        varbinds = [Varbind(varbind.oid) for varbind in self.varbinds]
        return Pdu(self.type, varbinds)


    def create_result(self, response):
        return self.session.collection(response.varbinds)


    def validate(self, response):
        """ Raise an exception if *response* is not a usable reply: None
            means the request timed out, and a non-zero error status is a
            logical error flagged by the agent.
        """

        if response is None:
            raise errors.RequestTimeout('no response received')

        if response.error_status != fields.NO_ERROR:
            raise errors.ProtocolStatusError(response.error_status, response.error_index)


# end of class Operation



class GetOperation(Operation):
    type = fields.GET



class GetNextOperation(Operation):
    type = fields.GETNEXT



class GetBulkOperation(Operation):
    """ A single GETBULK exchange: the first *non_repeaters* varbinds are
        advanced once, the rest up to *max_repetitions* times. The result
        is every binding the agent returned, in order.
    """

    type = fields.GETBULK

    def __init__(self, session, varbinds, non_repeaters, max_repetitions):

        Operation.__init__(self, session, varbinds)

        non_repeaters = int(non_repeaters)
        max_repetitions = int(max_repetitions)

        if non_repeaters < 0 or non_repeaters > len(self.varbinds):
            raise ValueError('non_repeaters must be between 0 and the number of varbinds')

        if max_repetitions < 0:
            raise ValueError('max_repetitions must be non-negative')

        self.non_repeaters = non_repeaters
        self.max_repetitions = max_repetitions


    def create_request(self):

        varbinds = [Varbind(varbind.oid) for varbind in self.varbinds]
        return Pdu(self.type, varbinds, non_repeaters=self.non_repeaters,
                   max_repetitions=self.max_repetitions)


# end of class GetBulkOperation



class SetOperation(Operation):

    type = fields.SET

    def create_request(self):

        varbinds = list()
        for varbind in self.varbinds:
            varbinds.append(Varbind(varbind.oid, varbind.value, varbind.syntax))

        return Pdu(self.type, varbinds)


# end of class SetOperation



class Delivery:
    """ Hands the completion of one asynchronous invocation to the runtime
        worker pool, and calls the user's *callback* with the resulting
        :class:`bulkwalk.response.Event` exactly once. Exceptions raised
        by the callback are logged and otherwise ignored.
    """

    def __init__(self, session, callback):

        self.session = session
        self.callback = callback
        self.delivered = False
        self._lock = threading.Lock()


    def __call__(self, method, *args):
        self.session.runtime.workers.submit(self.run, method, args)


    def run(self, method, args):

        try:
            response = method(*args)
        except Exception as error:
            response = ExceptionResponse(error)

        with self._lock:
            if self.delivered:
                logger.warning('dropping duplicate completion for %r', self.callback)
                return

            self.delivered = True

        try:
            self.callback(Event(self.session, response))
        except Exception:
            logger.exception('completion callback %r raised an exception', self.callback)


# end of class Delivery


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
