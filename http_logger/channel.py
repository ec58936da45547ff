"""Intake channel: unbounded multi-producer, single-consumer FIFO of log lines."""

import queue
import threading

from http_logger.errors import ChannelClosed

# End-of-stream marker, enqueued once by close().
_CLOSED = object()


class IntakeChannel:
    """Hands formatted lines from request threads to the writer thread.

    ``send`` never blocks. Once ``close`` is called every later ``send``
    raises ChannelClosed, while lines already queued are still delivered;
    ``receive`` returns None after the last of them.
    """

    def __init__(self):
        self._queue: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def pending(self) -> int:
        """Approximate number of lines waiting for the writer."""
        with self._lock:
            size = self._queue.qsize()
            if self._closed:
                # Not a line: the end-of-stream marker.
                size -= 1
        return max(size, 0)

    def send(self, line: str) -> None:
        """Enqueue a line. Raises ChannelClosed if the channel was closed."""
        with self._lock:
            if self._closed:
                raise ChannelClosed()
            self._queue.put_nowait(line)

    def receive(self, timeout: float | None = None) -> str | None:
        """Block for the next line. Returns None at end of stream.

        With a timeout, raises queue.Empty if nothing arrives in time.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # Leave the marker for any later receive() call.
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    def close(self) -> None:
        """Refuse further sends. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put_nowait(_CLOSED)
