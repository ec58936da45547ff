"""Request handling: turns posted severity fields into queued log lines."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime

from http_logger.channel import IntakeChannel
from http_logger.errors import ChannelClosed
from http_logger.formatter import format_line, local_now
from http_logger.models import IngestResult, Outcome, Severity, SEVERITY_NAMES

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = f"Missing one of {list(SEVERITY_NAMES)} in POST data."


def ingest(fields: Mapping, channel: IntakeChannel,
           now: Callable[[], datetime] = local_now) -> IngestResult:
    """Format and enqueue one line per recognized severity field.

    Success means the line was accepted by the channel, not that it reached
    the disk. Absent, non-string and unknown fields are skipped.
    """
    result = IngestResult()

    for severity in Severity:
        value = fields.get(severity.value)
        if not isinstance(value, str):
            continue

        line = format_line(severity, value, now())
        size = len(line.encode("utf-8"))
        try:
            channel.send(line)
        except ChannelClosed as exc:
            logger.warning("Dropping %s line, writer is gone: %s", severity.value, exc)
            result.errors[severity.value] = str(exc)
        else:
            result.success[severity.value] = str(size)

    return result


def classify(result: IngestResult) -> Outcome:
    """BAD_REQUEST if nothing was recognized, PARTIAL on any error, else OK."""
    if result.is_empty:
        return Outcome.BAD_REQUEST
    if result.errors:
        return Outcome.PARTIAL
    return Outcome.OK
