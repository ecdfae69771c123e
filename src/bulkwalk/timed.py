""" Requests with a timeout and a bounded number of retries, layered on a
    protocol engine that only knows how to send a request and, eventually,
    call back with a response.

Each attempt races the engine's completion against a timer. Whichever
arrives first for the current attempt wins; anything belonging to an
earlier attempt, or arriving after the request is resolved, is dropped.
A request therefore delivers exactly one result: a response, an engine
error, or a :class:`bulkwalk.errors.RequestTimeout` once every attempt has
expired.
"""

import functools
import logging
import threading

from . import errors

logger = logging.getLogger(__name__)


class TimedRequest:
    """ One outbound *pdu* for *destination*, sent through *engine*, with
        *timeout* seconds allowed for each attempt and up to *retries*
        additional attempts after the first. Timers are scheduled with
        *scheduler*, a :class:`bulkwalk.runtime.Scheduler`.

        Subclasses decide what happens to the result by implementing
        :func:`_deliver`.
    """

    def __init__(self, engine, scheduler, pdu, destination, retries, timeout):

        self.engine = engine
        self.scheduler = scheduler
        self.pdu = pdu
        self.destination = destination
        self.retries = int(retries)
        self.timeout = float(timeout)

        self.attempts = 0
        self.timer = None
        self.handle = None
        self.resolved = False

        self._lock = threading.Lock()


    def send(self):
        """ Start a new attempt: arm a fresh timer, then hand the request
            to the engine.
        """

        with self._lock:
            if self.resolved:
                return

            self.attempts += 1
            attempt = self.attempts
            self.handle = None
            self.timer = self.scheduler.schedule(self.timeout, self._expired, attempt)

        logger.debug('request %d to %s: attempt %d, timeout %.3fs',
                     self.pdu.id, self.destination, attempt, self.timeout)

        callback = functools.partial(self._completed, attempt)

        try:
            handle = self.engine.send(self.pdu, self.destination, callback)
        except Exception as error:
            logger.debug('request %d to %s: engine refused attempt %d: %s',
                         self.pdu.id, self.destination, attempt, error)
            self._resolve(None, error)
            return

        with self._lock:
            current = attempt == self.attempts and self.resolved == False
            if current:
                self.handle = handle

        if current == False:
            # This attempt was overtaken while the engine was sending it.
            self.engine.cancel(handle)


    def _completed(self, attempt, response, error=None):

        with self._lock:
            if self.resolved:
                return

            stale = attempt != self.attempts

        if stale:
            logger.debug('request %d: ignoring completion of stale attempt %d',
                         self.pdu.id, attempt)
            return

        self._resolve(response, error)


    def _expired(self, attempt):

        with self._lock:
            if self.resolved or attempt != self.attempts:
                return

            handle = self.handle
            self.handle = None
            self.timer = None

            retry = self.retries > 0
            if retry:
                self.retries -= 1

        if handle is not None:
            self.engine.cancel(handle)

        if retry:
            logger.debug('request %d to %s: attempt %d timed out, retrying',
                         self.pdu.id, self.destination, attempt)
            self.send()
            return

        logger.debug('request %d to %s: timed out after %d attempts',
                     self.pdu.id, self.destination, attempt)

        error = errors.RequestTimeout('no response from %s after %d attempts' % (self.destination, attempt))
        self._resolve(None, error)


    def abandon(self):
        """ Resolve the request without delivering anything: cancel the
            timer and any in-flight attempt. Returns False if the request
            was already resolved.
        """

        with self._lock:
            if self.resolved:
                return False

            self.resolved = True
            timer = self.timer
            handle = self.handle
            self.timer = None
            self.handle = None

        if timer is not None:
            timer.cancel()

        if handle is not None:
            self.engine.cancel(handle)

        return True


    def _resolve(self, response, error):

        with self._lock:
            if self.resolved:
                return False

            self.resolved = True
            timer = self.timer
            self.timer = None
            self.handle = None

        if timer is not None:
            timer.cancel()

        self._deliver(response, error)
        return True


    def _deliver(self, response, error):
        raise NotImplementedError('TimedRequest subclasses must implement _deliver()')


# end of class TimedRequest



class SyncRequest(TimedRequest):
    """ A :class:`TimedRequest` whose result is collected by a caller
        blocking in :func:`get`.
    """

    def __init__(self, *args, **kwargs):

        TimedRequest.__init__(self, *args, **kwargs)

        self.response = None
        self.error = None
        self.done = False
        self.interrupted = False
        self._condition = threading.Condition()


    def _deliver(self, response, error):

        with self._condition:
            self.response = response
            self.error = error
            self.done = True
            self._condition.notify_all()


    def get(self):
        """ Send the request if that has not happened yet, block until it
            is resolved, and return the response :class:`bulkwalk.protocol.Pdu`.
            An engine error or :class:`bulkwalk.errors.RequestTimeout` is
            raised instead if that is how the request ended. If the wait
            itself is broken by an exception, such as KeyboardInterrupt,
            the request is abandoned before the exception propagates.
        """

        if self.attempts == 0:
            self.send()

        try:
            with self._condition:
                while self.done == False and self.interrupted == False:
                    self._condition.wait()

                done = self.done
        except BaseException:
            self.abandon()
            raise

        if done == False:
            self.abandon()
            raise errors.RequestTimeout('request to %s interrupted' % (self.destination,))

        if self.error is not None:
            raise self.error

        return self.response


    def interrupt(self):
        """ Wake a caller blocked in :func:`get`, which then abandons the
            request and reports it as timed out. Has no effect on a request
            that is already resolved.
        """

        with self._condition:
            self.interrupted = True
            self._condition.notify_all()


# end of class SyncRequest



class AsyncRequest(TimedRequest):
    """ A :class:`TimedRequest` that calls *listener* with
        ``(response, error)`` once resolved. The listener runs on whichever
        thread resolved the request: the engine's, or the scheduler's.
    """

    def __init__(self, engine, scheduler, pdu, destination, retries, timeout, listener):

        TimedRequest.__init__(self, engine, scheduler, pdu, destination, retries, timeout)
        self.listener = listener


    def _deliver(self, response, error):
        self.listener(response, error)


# end of class AsyncRequest


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
