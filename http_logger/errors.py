"""Exceptions raised by the ingestion pipeline."""


class HttpLoggerError(Exception):
    """Base class for errors raised by http_logger."""


class ChannelClosed(HttpLoggerError):
    """Raised when a line is sent after the intake channel was closed."""

    def __init__(self, message: str = "sending on a closed channel"):
        super().__init__(message)


class LogFileError(HttpLoggerError):
    """Raised when the log file cannot be opened or created."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Unable to open log file {path}. Reason: {reason}")
        self.path = path
        self.reason = reason
