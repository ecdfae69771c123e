""" A fan-in point for many outstanding operations: submit each one, then
    harvest their events in whatever order they complete.
"""

import queue
import threading


class CompletionQueue:
    """ Submitted operations are invoked with a callback that moves them
        from the pending set to the queue of completed
        :class:`bulkwalk.response.Event` instances. The queue is idle when
        nothing is pending and every event has been retrieved.
    """

    def __init__(self):

        self.pending = set()
        self.completed = queue.SimpleQueue()
        self._lock = threading.Lock()


    def __len__(self):
        """ The number of operations submitted but not yet retrieved.
        """

        with self._lock:
            return len(self.pending) + self.completed.qsize()


    def is_idle(self):

        with self._lock:
            return len(self.pending) == 0 and self.completed.empty()


    def poll(self, timeout=None):
        """ Return the next completed event. With no *timeout*, return
            immediately, with None if nothing has completed; otherwise
            wait up to *timeout* seconds for something to complete.
        """

        try:
            if timeout is None:
                return self.completed.get_nowait()
            else:
                return self.completed.get(timeout=timeout)
        except queue.Empty:
            return None


    def submit(self, operation):
        """ Invoke *operation* asynchronously. Its event will be available
            from :func:`poll` or :func:`take` once it completes.
        """

        token = object()

        def completed(event):
            with self._lock:
                self.pending.discard(token)
                self.completed.put(event)

        with self._lock:
            self.pending.add(token)

        try:
            operation.invoke(completed)
        except Exception:
            with self._lock:
                self.pending.discard(token)
            raise


    def take(self):
        """ Block until an operation completes, and return its event.
        """

        return self.completed.get()


# end of class CompletionQueue


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
