""" A :class:`Session` binds together everything needed to talk to one
    agent: the protocol engine, the destination address, the per-target
    configuration, the catalog used to resolve and display names, and the
    runtime whose scheduler and workers the requests use.
"""

import logging

from . import config as configmodule
from . import operation
from . import timed
from . import walker
from .catalog import Catalog
from .protocol import Varbind, VarbindCollection

logger = logging.getLogger(__name__)


class Session:
    """ Operations against the agent at *destination*, sent through
        *engine*. The *config* is a :class:`bulkwalk.config.TargetConfig`;
        if not specified, :func:`bulkwalk.config.defaults` is used. The
        *catalog* defaults to an empty :class:`bulkwalk.catalog.Catalog`,
        which resolves only dotted numeric names.

        The timeout and retry settings are read from :attr:`config` each
        time a request is sent, so changes apply to subsequent requests.

        If *owns_engine* is True, :func:`close` also closes the engine.
    """

    def __init__(self, engine, destination, runtime, config=None, catalog=None, owns_engine=False):

        if config is None:
            config = configmodule.defaults()

        if catalog is None:
            catalog = Catalog()

        self.engine = engine
        self.destination = destination
        self.runtime = runtime
        self.config = config
        self.catalog = catalog
        self.owns_engine = owns_engine
        self.closed = False


    def __enter__(self):
        return self


    def __exit__(self, *args):
        self.close()


    def __repr__(self):
        return 'Session(' + repr(self.destination) + ')'


    def close(self):

        if self.closed:
            return

        self.closed = True

        if self.owns_engine:
            self.engine.close()


    ## Requests, as used by operations.

    def request(self, pdu):
        """ Return a :class:`bulkwalk.timed.SyncRequest` for *pdu*, not yet
            sent; its :func:`get` method sends it and waits.
        """

        config = self.config
        return timed.SyncRequest(self.engine, self.runtime.scheduler, pdu,
                                 self.destination, config.retries, config.timeout)


    def request_async(self, pdu, listener):
        """ Send *pdu*; *listener* is called with ``(response, error)``
            once the request is resolved.
        """

        config = self.config
        request = timed.AsyncRequest(self.engine, self.runtime.scheduler, pdu,
                                     self.destination, config.retries, config.timeout,
                                     listener)
        request.send()
        return request


    ## Names and bindings.

    def bind(self, varbind):
        """ Return *varbind* named and formatted through this session's
            catalog.
        """

        return varbind.bind(self.catalog)


    def collection(self, varbinds):
        return VarbindCollection(self.bind(varbind) for varbind in varbinds)


    def new_varbind(self, name, value=None, syntax=None):
        """ Return a :class:`bulkwalk.protocol.Varbind` for the object
            *name*, resolved through the catalog, holding *value*. This is
            the way to build the arguments for :func:`new_set`.
        """

        address = self.catalog.resolve(name)
        return Varbind(address, value, syntax, catalog=self.catalog)


    def varbinds(self, names):

        varbinds = list()

        for name in names:
            if isinstance(name, Varbind):
                varbinds.append(name)
            else:
                varbinds.append(self.new_varbind(name))

        return varbinds


    ## Operation factories.

    def new_get(self, *oids):
        return operation.GetOperation(self, self.varbinds(oids))


    def new_get_next(self, *oids):
        return operation.GetNextOperation(self, self.varbinds(oids))


    def new_get_bulk(self, non_repeaters, max_repetitions, *oids):
        return operation.GetBulkOperation(self, self.varbinds(oids), non_repeaters, max_repetitions)


    def new_set(self, *varbinds):
        return operation.SetOperation(self, varbinds)


    def new_walk(self, non_repeaters, *oids):
        """ Return an :class:`bulkwalk.walker.AsyncWalker` over the columns
            named by *oids* after the first *non_repeaters*.
        """

        return walker.AsyncWalker(self, self.varbinds(oids), non_repeaters,
                                  self.config.walk_max_repetitions)


    def new_walk_all(self, non_repeaters, *oids):
        """ Return a :class:`bulkwalk.walker.WalkOperation`, whose result is
            the list of every row.
        """

        return walker.WalkOperation(self, self.varbinds(oids), non_repeaters,
                                    self.config.walk_max_repetitions)


    ## Blocking conveniences.

    def get(self, *oids):
        return self.new_get(*oids).invoke()


    def get_next(self, *oids):
        return self.new_get_next(*oids).invoke()


    def get_bulk(self, non_repeaters, max_repetitions, *oids):
        return self.new_get_bulk(non_repeaters, max_repetitions, *oids).invoke()


    def set(self, *varbinds):
        return self.new_set(*varbinds).invoke()


    def walk(self, non_repeaters, *oids):
        """ Return a :class:`bulkwalk.walker.SyncWalker`; iterate over it
            for the rows of the table.
        """

        return walker.SyncWalker(self, self.varbinds(oids), non_repeaters,
                                 self.config.walk_max_repetitions)


    ## Non-blocking conveniences. The callback receives an Event.

    def async_get(self, callback, *oids):
        self.new_get(*oids).invoke(callback)


    def async_get_next(self, callback, *oids):
        self.new_get_next(*oids).invoke(callback)


    def async_get_bulk(self, callback, non_repeaters, max_repetitions, *oids):
        self.new_get_bulk(non_repeaters, max_repetitions, *oids).invoke(callback)


    def async_set(self, callback, *varbinds):
        self.new_set(*varbinds).invoke(callback)


    def async_walk(self, callback, non_repeaters, *oids):
        """ Start a walk. The *callback* receives an event holding the
            :class:`bulkwalk.walker.AsyncWalker` once its first batch has
            arrived; from there, call its ``next()`` method, and invoke the
            walker again whenever that returns a
            :class:`bulkwalk.response.NotReady`.
        """

        self.new_walk(non_repeaters, *oids).invoke(callback)


# end of class Session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
