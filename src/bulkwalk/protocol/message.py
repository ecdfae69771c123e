""" A class representation of a protocol data unit (PDU): the payload of
    a single request, or of the response to one.
"""

import itertools
import threading

from . import fields
from .varbind import Varbind


class Pdu:
    """ The :class:`Pdu` carries everything a request or response needs
        beyond the destination it is sent to: the PDU *type*, the ordered
        *varbinds*, and a request *id* unique to this correspondence; a
        response carries the id of the request it answers. Request ids are
        automatically generated if not specified.

        For a GETBULK request, *non_repeaters* is the number of leading
        varbinds fetched once, and *max_repetitions* the number of times
        the remaining varbinds are advanced. For a response, *error_status*
        and *error_index* report a logical error flagged by the agent.

        :ivar valid_types: A set of valid strings for the PDU type.
    """

    valid_types = set(fields.REQUEST_TYPES + (fields.RESPONSE,))

    def __init__(self, type, varbinds=(), id=None, non_repeaters=0,
                       max_repetitions=0, error_status=0, error_index=0):

        if type in self.valid_types:
            pass
        else:
            raise ValueError('invalid PDU type: ' + repr(type))

        if id is None:
            id = _id_next()

        self.type = type
        self.id = id
        self.varbinds = list(varbinds)
        self.non_repeaters = int(non_repeaters)
        self.max_repetitions = int(max_repetitions)
        self.error_status = int(error_status)
        self.error_index = int(error_index)


    def __getitem__(self, index):
        return self.varbinds[index]


    def __iter__(self):
        return iter(self.varbinds)


    def __len__(self):
        return len(self.varbinds)


    def __repr__(self):
        return 'Pdu(%s, id=%d, %r)' % (self.type, self.id, self.varbinds)


    @property
    def error_status_text(self):
        return fields.STATUS_TEXT.get(self.error_status, 'status ' + str(self.error_status))


    def response(self, varbinds, error_status=0, error_index=0):
        """ Return a RESPONSE :class:`Pdu` answering this request.
        """

        return Pdu(fields.RESPONSE, varbinds, self.id,
                   error_status=error_status, error_index=error_index)


    def to_dict(self):

        payload = dict()
        payload['type'] = self.type
        payload['id'] = self.id
        payload['varbinds'] = [varbind.to_list() for varbind in self.varbinds]

        if self.type == fields.GETBULK:
            payload['non_repeaters'] = self.non_repeaters
            payload['max_repetitions'] = self.max_repetitions

        if self.error_status:
            payload['error_status'] = self.error_status
            payload['error_index'] = self.error_index

        return payload


    @classmethod
    def from_dict(cls, payload):

        varbinds = [Varbind.from_list(parts) for parts in payload.get('varbinds', ())]

        return cls(payload['type'], varbinds, payload['id'],
                   non_repeaters=payload.get('non_repeaters', 0),
                   max_repetitions=payload.get('max_repetitions', 0),
                   error_status=payload.get('error_status', 0),
                   error_index=payload.get('error_index', 0))


# end of class Pdu



_id_min = 1
_id_max = 0x7FFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def _id_next():
    """ Return the next request identification number for subroutines to
        use when constructing a PDU.
    """

    global _id_ticker
    _id_lock.acquire()
    id = next(_id_ticker)

    if id >= _id_max:
        _id_ticker = itertools.count(_id_min)

        if id > _id_max:
            # This shouldn't happen, but here we are...
            id = next(_id_ticker)

    _id_lock.release()

    return id


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
