""" The shared resources behind every session: a timer scheduler used by
    request timeouts, and the worker pool that runs completion callbacks.
    A :class:`Runtime` owns one of each, creating them on first use, and
    is passed explicitly to every :class:`bulkwalk.session.Session` that
    should share them.
"""

import concurrent.futures
import heapq
import itertools
import logging
import threading
import time

logger = logging.getLogger(__name__)

DEFAULT_WORKER_POOL_SIZE = 4


class Runtime:
    """ Owner of a :class:`Scheduler` and a worker pool. Both are created
        lazily on first access of the :attr:`scheduler` and :attr:`workers`
        properties; after :func:`shutdown` those properties raise
        :class:`RuntimeError`. A :class:`Runtime` can be used as a context
        manager, shutting down on exit.
    """

    def __init__(self, workers=DEFAULT_WORKER_POOL_SIZE):

        workers = int(workers)
        if workers < 1:
            raise ValueError('a runtime needs at least one worker')

        self.worker_count = workers
        self.closed = False

        self._lock = threading.Lock()
        self._scheduler = None
        self._workers = None


    def __enter__(self):
        return self


    def __exit__(self, *args):
        self.shutdown()


    @property
    def scheduler(self):

        scheduler = self._scheduler

        if scheduler is None or self.closed:
            with self._lock:
                if self.closed:
                    raise RuntimeError('runtime has been shut down')

                if self._scheduler is None:
                    self._scheduler = Scheduler()

                scheduler = self._scheduler

        return scheduler


    @property
    def workers(self):

        workers = self._workers

        if workers is None or self.closed:
            with self._lock:
                if self.closed:
                    raise RuntimeError('runtime has been shut down')

                if self._workers is None:
                    self._workers = concurrent.futures.ThreadPoolExecutor(
                                max_workers=self.worker_count,
                                thread_name_prefix='bulkwalk-worker')

                workers = self._workers

        return workers


    def shutdown(self, wait=True):
        """ Stop the scheduler and the worker pool, if either was ever
            started. Timers not yet fired are discarded. Calling this more
            than once has no further effect.
        """

        with self._lock:
            if self.closed:
                return

            self.closed = True
            scheduler = self._scheduler
            workers = self._workers
            self._scheduler = None
            self._workers = None

        if scheduler is not None:
            scheduler.stop(wait)

        if workers is not None:
            workers.shutdown(wait=wait)


# end of class Runtime



class Timer:
    """ A single scheduled call, as returned by :func:`Scheduler.schedule`.
    """

    def __init__(self, scheduler, deadline, method, args):

        self.scheduler = scheduler
        self.deadline = deadline
        self.method = method
        self.args = args
        self.cancelled = False
        self.fired = False


    def cancel(self):
        """ Prevent this timer from firing. Returns True if the timer was
            still pending, False if it already fired or was already
            cancelled.
        """

        return self.scheduler._cancel(self)


# end of class Timer



class Scheduler:
    """ Background thread to invoke delayed calls. Every call runs on the
        one scheduler thread, in deadline order; a slow call delays the
        ones after it, so scheduled methods should hand off anything
        lengthy.
    """

    def __init__(self):

        self.shutdown = False

        self._heap = list()
        self._sequence = itertools.count()
        self._condition = threading.Condition()

        self.thread = threading.Thread(target=self.run, name='bulkwalk-scheduler')
        self.thread.daemon = True
        self.thread.start()


    def _cancel(self, timer):

        with self._condition:
            if timer.fired or timer.cancelled:
                return False

            timer.cancelled = True

        return True


    def pending(self):
        """ Return the number of timers that have neither fired nor been
            cancelled.
        """

        with self._condition:
            return sum(1 for entry in self._heap if not entry[2].cancelled)


    def run(self):

        while True:
            timer = self._next()

            if timer is None:
                break

            try:
                timer.method(*timer.args)
            except Exception:
                logger.exception('scheduled call %r failed', timer.method)


    def _next(self):
        """ Block until the earliest pending timer is due, mark it fired,
            and return it. Returns None once the scheduler is stopped.
        """

        with self._condition:
            while self.shutdown == False:
                if len(self._heap) == 0:
                    self._condition.wait()
                    continue

                deadline, sequence, timer = self._heap[0]

                if timer.cancelled:
                    heapq.heappop(self._heap)
                    continue

                delay = deadline - time.monotonic()
                if delay > 0:
                    self._condition.wait(delay)
                    continue

                heapq.heappop(self._heap)
                timer.fired = True
                return timer

        return None


    def schedule(self, delay, method, *args):
        """ Call *method* with *args* after *delay* seconds. Returns a
            :class:`Timer` that can be used to cancel the call.
        """

        deadline = time.monotonic() + float(delay)

        with self._condition:
            if self.shutdown:
                raise RuntimeError('scheduler has been stopped')

            timer = Timer(self, deadline, method, args)
            heapq.heappush(self._heap, (deadline, next(self._sequence), timer))
            self._condition.notify()

        return timer


    def stop(self, wait=True):

        with self._condition:
            self.shutdown = True
            self._heap = list()
            self._condition.notify_all()

        if wait and threading.current_thread() is not self.thread:
            self.thread.join()


# end of class Scheduler


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
