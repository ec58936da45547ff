"""Log line formatting: pure functions between LogRecord and text lines."""

import re
from datetime import datetime

from http_logger.models import LogRecord, Severity

LINE_PATTERN = re.compile(r"^\[([^\]]+)\] \[(\w+)\] (.*)$", re.DOTALL)


def local_now() -> datetime:
    """Current wall-clock time in the local timezone, offset-aware."""
    return datetime.now().astimezone()


def format_line(severity: Severity, message: str, now: datetime) -> str:
    """Render one log line: ``[<timestamp>] [<SEVERITY>] <message>\\n``.

    The message is written verbatim; embedded newlines are not escaped.
    """
    return f"[{now}] [{severity.label}] {message}\n"


def format_record(record: LogRecord) -> str:
    return format_line(record.severity, record.message, record.timestamp)


def parse_line(line: str) -> LogRecord | None:
    """Parse a line produced by format_line. Returns None for unparseable lines."""
    if line.endswith("\n"):
        line = line[:-1]
    match = LINE_PATTERN.match(line)
    if not match:
        return None

    timestamp_str, label, message = match.groups()
    severity = Severity.from_label(label)
    if severity is None:
        return None
    try:
        timestamp = datetime.fromisoformat(timestamp_str)
    except ValueError:
        return None

    return LogRecord(severity=severity, message=message, timestamp=timestamp)
