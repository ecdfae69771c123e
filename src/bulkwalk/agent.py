""" An in-memory agent: an ordered table of addresses and values answering
    GET, GETNEXT, GETBULK, and SET requests. It backs the loopback engine,
    and can be served over ZeroMQ with
    :class:`bulkwalk.transport.zmq.request.Server`.
"""

import bisect
import logging
import threading

from .protocol import fields
from .protocol import oid as oidmodule
from .protocol import Varbind

logger = logging.getLogger(__name__)


class Agent:
    """ The *entries* are (address, value) or (address, value, syntax)
        tuples. If *max_response* is set, no response carries more than
        that many bindings, the way a real agent drops repetitions that
        would not fit in a single datagram.

        :ivar requests: The number of requests handled.
    """

    def __init__(self, entries=(), max_response=None):

        self.max_response = max_response
        self.requests = 0

        self._oids = list()
        self._values = dict()
        self._lock = threading.Lock()

        self.load(entries)


    def __len__(self):
        return len(self._oids)


    def load(self, entries):

        for entry in entries:
            self.set_value(*entry)


    def set_value(self, address, value, syntax=None):

        address = oidmodule.parse(address)
        varbind = Varbind(address, value, syntax)

        with self._lock:
            if address not in self._values:
                bisect.insort(self._oids, address)
            self._values[address] = varbind


    def value(self, address):
        return self._values[oidmodule.parse(address)].value


    def handle(self, pdu):
        """ Return the response :class:`bulkwalk.protocol.Pdu` for the
            request *pdu*.
        """

        with self._lock:
            self.requests += 1

            if pdu.type == fields.GET:
                varbinds = [self._get(varbind.oid) for varbind in pdu]
            elif pdu.type == fields.GETNEXT:
                varbinds = [self._next(varbind.oid) for varbind in pdu]
            elif pdu.type == fields.GETBULK:
                varbinds = self._bulk(pdu)
            elif pdu.type == fields.SET:
                return self._set(pdu)
            else:
                return pdu.response(pdu.varbinds, fields.GEN_ERR, 0)

        if self.max_response is not None:
            varbinds = varbinds[:self.max_response]

        return pdu.response(varbinds)


    def _get(self, address):

        try:
            return self._values[address]
        except KeyError:
            pass

        # An exact object (instance suffix .0) absent is noSuchInstance if
        # anything lives beneath its parent; otherwise noSuchObject.

        parent = address[:-1]
        position = bisect.bisect_left(self._oids, parent)

        if position < len(self._oids) and oidmodule.startswith(self._oids[position], parent):
            return Varbind(address, None, fields.NO_SUCH_INSTANCE)

        return Varbind(address, None, fields.NO_SUCH_OBJECT)


    def _next(self, address):

        position = bisect.bisect_right(self._oids, address)

        if position < len(self._oids):
            return self._values[self._oids[position]]

        return Varbind(address, None, fields.END_OF_MIB_VIEW)


    def _bulk(self, pdu):

        non_repeaters = min(max(pdu.non_repeaters, 0), len(pdu))
        repetitions = max(pdu.max_repetitions, 0)

        varbinds = list()
        for varbind in pdu[:non_repeaters]:
            varbinds.append(self._next(varbind.oid))

        current = [varbind.oid for varbind in pdu[non_repeaters:]]

        if len(current) == 0:
            return varbinds

        for repetition in range(repetitions):
            exhausted = True

            for column, address in enumerate(current):
                varbind = self._next(address)
                varbinds.append(varbind)
                current[column] = varbind.oid

                if varbind.exception == False:
                    exhausted = False

            if exhausted:
                break

        return varbinds


    def _set(self, pdu):

        for position, varbind in enumerate(pdu, 1):
            if varbind.oid not in self._values:
                logger.debug('SET of unknown address %s refused', oidmodule.dotted(varbind.oid))
                return pdu.response(pdu.varbinds, fields.NO_CREATION, position)

        for varbind in pdu:
            self._values[varbind.oid] = Varbind(varbind.oid, varbind.value, varbind.syntax)

        return pdu.response(pdu.varbinds)


# end of class Agent


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
