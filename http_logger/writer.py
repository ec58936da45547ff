"""LogWriter: the single thread that owns the log file and drains the intake channel."""

import logging
import os
import threading
from enum import Enum
from threading import Thread

from http_logger.channel import IntakeChannel
from http_logger.errors import LogFileError

logger = logging.getLogger(__name__)


class WriterState(Enum):
    STARTING = "starting"
    RUNNING = "running"
    TERMINATED = "terminated"


def open_log(log_path: str):
    """Open/create the log file for unbuffered appending. Raises LogFileError on failure.

    Each write goes straight to the OS, so a failed write leaves nothing
    behind in a user-space buffer to be retried later.
    """
    try:
        parent = os.path.dirname(log_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        return open(log_path, "ab", buffering=0)
    except OSError as exc:
        raise LogFileError(log_path, exc.strerror or str(exc)) from exc


class LogWriter(Thread):
    """Consumes lines from the channel in order and appends each one.

    The file is opened in the constructor so that a bad path fails before the
    server starts accepting requests. A failed write is logged and the line is
    dropped; the loop keeps going. The thread ends when the channel is closed
    and drained.
    """

    def __init__(self, channel: IntakeChannel, log_path: str):
        super().__init__(name="log-writer", daemon=True)
        self._channel = channel
        self._log_path = log_path
        self._file = open_log(log_path)
        self._lock = threading.Lock()
        self._written = 0
        self._failed = 0
        self._state = WriterState.STARTING

    @property
    def log_path(self) -> str:
        return self._log_path

    @property
    def state(self) -> WriterState:
        with self._lock:
            return self._state

    @property
    def written(self) -> int:
        with self._lock:
            return self._written

    @property
    def failed(self) -> int:
        with self._lock:
            return self._failed

    def _set_state(self, state: WriterState):
        with self._lock:
            self._state = state

    def run(self):
        self._set_state(WriterState.RUNNING)
        logger.info("Writer started, appending to %s", self._log_path)
        try:
            while True:
                line = self._channel.receive()
                if line is None:
                    break
                self._write(line)
        finally:
            self._close_file()
            self._set_state(WriterState.TERMINATED)
            logger.info("Writer stopped: written=%d, failed=%d",
                        self.written, self.failed)

    def _write(self, line: str):
        data = memoryview(line.encode("utf-8"))
        try:
            # Raw files may accept fewer bytes than offered.
            while data:
                count = self._file.write(data)
                if not count:
                    raise OSError(f"short write, {len(data)} byte(s) not written")
                data = data[count:]
        except (OSError, ValueError) as exc:
            logger.error("Error while writing to log file %s, reason: %s",
                         self._log_path, exc)
            with self._lock:
                self._failed += 1
            return

        with self._lock:
            self._written += 1

    def _close_file(self):
        try:
            self._file.close()
        except OSError as exc:
            logger.error("Error while closing log file %s, reason: %s",
                         self._log_path, exc)

    def stop(self, timeout: float | None = 5.0):
        """Close the channel and wait for queued lines to be written."""
        self._channel.close()
        if self.ident is None:
            # Never started: nobody else will close the file.
            self._close_file()
            self._set_state(WriterState.TERMINATED)
            return
        self.join(timeout=timeout)
        if self.is_alive():
            logger.warning("Writer did not finish within %.1fs, %d line(s) pending",
                           timeout, self._channel.pending)
