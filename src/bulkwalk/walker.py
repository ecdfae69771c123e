""" Table walking: turn a sequence of GETBULK exchanges into a sequence of
    table rows.

A walk requests one or more column base addresses (the repeaters),
optionally preceded by addresses fetched once per exchange (the
non-repeaters). Each bulk response holds the non-repeating entries
followed by up to *max_repetitions* groups of one entry per column; each
complete group is a row. :func:`AsyncWalker.next` hands out one row at a
time, asks for another fetch when the batch runs dry, and reports the end
of the table once any column steps outside its base address.

Fetching is explicit for :class:`AsyncWalker`: when no row is available
:func:`AsyncWalker.next` returns a :class:`bulkwalk.response.NotReady`
whose *resume* is the walker, which the caller invokes like any other
operation. :class:`SyncWalker` does the fetching itself, and iterates.
"""

import logging
import threading

from . import errors
from .operation import Delivery, Operation
from .protocol import fields
from .protocol import oid as oidmodule
from .protocol import Pdu, Varbind, VarbindCollection
from .response import Event, ExceptionResponse, NotReady, SuccessResponse

logger = logging.getLogger(__name__)

AWAITING_FIRST_BATCH = 'AWAITING_FIRST_BATCH'
SERVING_BATCH = 'SERVING_BATCH'
AWAITING_NEXT_BATCH = 'AWAITING_NEXT_BATCH'
END_OF_TABLE = 'END_OF_TABLE'


class AsyncWalker(Operation):
    """ A cursor over the rows of the table whose columns are the *varbinds*
        after the first *non_repeaters*. Each fetch is a GETBULK asking for
        *max_repetitions* rows.

        Invoking the walker, blocking or with a callback, performs one
        fetch; the envelope it delivers holds the walker itself. Only one
        fetch may be outstanding at a time; a second invocation while one
        is in progress delivers a failure.
    """

    type = fields.GETBULK

    def __init__(self, session, varbinds, non_repeaters, max_repetitions):

        Operation.__init__(self, session, varbinds)

        non_repeaters = int(non_repeaters)
        max_repetitions = int(max_repetitions)

        if non_repeaters < 0 or non_repeaters > len(self.varbinds):
            raise ValueError('non_repeaters must be between 0 and the number of varbinds')

        if len(self.varbinds) - non_repeaters < 1:
            raise ValueError('a walk requires at least one repeating column')

        if max_repetitions < 1:
            raise ValueError('max_repetitions must be at least 1')

        self.non_repeaters = non_repeaters
        self.max_repetitions = max_repetitions
        self.repeaters = len(self.varbinds) - non_repeaters

        self.requested = tuple(varbind.oid for varbind in self.varbinds)
        self.oids = list(self.requested)

        self.state = AWAITING_FIRST_BATCH
        self.batch = None
        self.offset = 0
        self.fetching = False
        self.lock = threading.RLock()


    def invoke(self, callback=None):

        with self.lock:
            busy = self.fetching
            ended = self.state == END_OF_TABLE

            if busy == False and ended == False:
                self.fetching = True

        if busy:
            error = RuntimeError('a fetch is already in progress for this walker')
            if callback is None:
                return ExceptionResponse(error)

            Delivery(self.session, callback)(ExceptionResponse, error)
            return

        if ended:
            if callback is None:
                return SuccessResponse(self)

            Delivery(self.session, callback)(SuccessResponse, self)
            return

        return Operation.invoke(self, callback)


    def _invoke(self):

        try:
            return Operation._invoke(self)
        finally:
            with self.lock:
                self.fetching = False


    def _finish(self, response, error):

        try:
            return Operation._finish(self, response, error)
        finally:
            with self.lock:
                self.fetching = False


    def create_request(self):

        with self.lock:
            oids = list(self.oids)

        varbinds = [Varbind(oid) for oid in oids]
        return Pdu(self.type, varbinds, non_repeaters=self.non_repeaters,
                   max_repetitions=self.max_repetitions)


    def create_result(self, response):

        with self.lock:
            self.accept(response.varbinds)

        return self


    def accept(self, batch):
        """ Take *batch*, the bindings of a bulk response, as the batch to
            serve rows from. A batch that cannot hold a single complete row
            raises :class:`bulkwalk.errors.TruncatedResponseError`, unless
            the session allows truncated repetitions, in which case the walk
            continues with only as many columns as the batch holds.
        """

        size = len(batch)
        non_repeaters = self.non_repeaters

        if size <= non_repeaters:
            raise errors.TruncatedResponseError('response contains no repeaters; too many non-repeaters?')

        if size < non_repeaters + self.repeaters:
            if self.session.config.walk_allows_truncated_repetition == False:
                raise errors.TruncatedResponseError('response contains a partial first repetition; increase the maximum response size or allow truncated repetitions')

            repeaters = size - non_repeaters
            logger.debug('%r: narrowing walk from %d to %d columns',
                         self, self.repeaters, repeaters)

            self.repeaters = repeaters
            del self.oids[non_repeaters + repeaters:]

        self.batch = list(batch)
        self.offset = non_repeaters
        self.state = SERVING_BATCH


    def next(self):
        """ Return the next row. The result is one of:

            * a :class:`bulkwalk.response.SuccessResponse` holding a
              :class:`bulkwalk.protocol.VarbindCollection` for the row;
            * a :class:`bulkwalk.response.SuccessResponse` holding None,
              once the end of the table is reached, and on every call
              after that;
            * a :class:`bulkwalk.response.NotReady`, when the current batch
              is used up; invoke its *resume* operation and try again.
        """

        with self.lock:
            if self.state == END_OF_TABLE:
                return SuccessResponse(None)

            if self.batch is None:
                return NotReady(self)

            offset = self.offset
            ended, complete = self._scan(offset)

            if ended:
                logger.debug('%r: end of table', self)
                self.state = END_OF_TABLE
                self.batch = None
                return SuccessResponse(None)

            if complete == False:
                self._restart_from(offset - self.repeaters)
                self.state = AWAITING_NEXT_BATCH
                self.batch = None
                return NotReady(self)

            row = self.create_row(self.batch, offset)
            self.offset = offset + self.repeaters

        return SuccessResponse(row)


    def _scan(self, offset):
        """ Examine the row starting at *offset*. Returns a tuple: whether
            the table has ended, and whether the row is complete within
            the current batch.
        """

        batch = self.batch
        count = 0

        while count < self.repeaters and offset + count < len(batch):
            varbind = batch[offset + count]
            base = self.requested[self.non_repeaters + count]

            if varbind.syntax == fields.END_OF_MIB_VIEW:
                return True, False

            if oidmodule.startswith(varbind.oid, base) == False:
                return True, False

            count += 1

        return False, count == self.repeaters


    def _restart_from(self, offset):
        """ Set the column addresses of the next fetch to those of the row
            at *offset*, the last complete row in the batch. Non-repeating
            addresses are sent unchanged.
        """

        for count in range(self.repeaters):
            self.oids[self.non_repeaters + count] = self.batch[offset + count].oid


    def create_row(self, batch, offset):
        """ Assemble the row at *offset*: the non-repeating bindings that
            fall under their requested addresses, one binding per column,
            and the index bindings the catalog derives from the first
            column.
        """

        row = VarbindCollection()

        for count in range(self.non_repeaters):
            varbind = batch[count]
            if oidmodule.startswith(varbind.oid, self.requested[count]):
                row.add(self.session.bind(varbind))

        for count in range(self.repeaters):
            varbind = self.session.bind(batch[offset + count])
            row.add(varbind)

            if count == 0:
                for index in varbind.indexes():
                    row.add_index(index)

        return row


# end of class AsyncWalker



class SyncWalker(AsyncWalker):
    """ A walker that fetches for itself: :func:`next` blocks while a fetch
        is in progress, and never returns a
        :class:`bulkwalk.response.NotReady`. A failed fetch is returned as
        the failure envelope.

        A :class:`SyncWalker` is also an iterator over the rows of the
        table; iteration raises the exception of a failed fetch.
    """

    def __iter__(self):
        return self


    def __next__(self):

        row = self.next().get()

        if row is None:
            raise StopIteration

        return row


    def next(self):

        while True:
            result = AsyncWalker.next(self)

            if result.ready:
                return result

            fetched = result.resume.invoke()

            if fetched.failed:
                return fetched


# end of class SyncWalker



class WalkOperation:
    """ An operation whose result is the list of every row of a table,
        gathered with as many fetches as the table requires. The arguments
        are those of :class:`AsyncWalker`; a fresh walker is used for each
        invocation.
    """

    def __init__(self, session, varbinds, non_repeaters, max_repetitions):

        self.session = session
        self.varbinds = tuple(varbinds)
        self.non_repeaters = non_repeaters
        self.max_repetitions = max_repetitions

        # Surface argument errors now, not on invocation.
        AsyncWalker(session, self.varbinds, non_repeaters, max_repetitions)


    def __repr__(self):
        names = ', '.join(varbind.name for varbind in self.varbinds)
        return 'WalkOperation(' + names + ')'


    def invoke(self, callback=None):

        if callback is None:
            walker = SyncWalker(self.session, self.varbinds, self.non_repeaters, self.max_repetitions)

            try:
                rows = list(walker)
            except Exception as error:
                return ExceptionResponse(error)

            return SuccessResponse(rows)

        walker = AsyncWalker(self.session, self.varbinds, self.non_repeaters, self.max_repetitions)
        collector = _Collector(self.session, walker, callback)
        collector.start()


# end of class WalkOperation



class _Collector:
    """ Drives an :class:`AsyncWalker` to the end of its table, one fetch
        at a time, and calls *callback* with the accumulated rows.
    """

    def __init__(self, session, walker, callback):

        self.session = session
        self.walker = walker
        self.callback = callback
        self.rows = list()


    def start(self):
        self.walker.invoke(self.fetched)


    def fetched(self, event):

        try:
            walker = event.get()

            while True:
                result = walker.next()

                if result.ready == False:
                    walker.invoke(self.fetched)
                    return

                row = result.get()

                if row is None:
                    break

                self.rows.append(row)

        except Exception as error:
            self.finish(ExceptionResponse(error))
        else:
            self.finish(SuccessResponse(self.rows))


    def finish(self, response):

        try:
            self.callback(Event(self.session, response))
        except Exception:
            logger.exception('completion callback %r raised an exception', self.callback)


# end of class _Collector


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
