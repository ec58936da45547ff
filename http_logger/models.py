"""Data model for ingested log records."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Severity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def label(self) -> str:
        """Uppercase tag written into the log line."""
        return self.value.upper()

    @classmethod
    def from_label(cls, label: str) -> "Severity | None":
        """Return the severity for an uppercase tag, or None if unknown."""
        try:
            return cls(label.lower())
        except ValueError:
            return None


# Field names accepted in POST data, in processing order.
SEVERITY_NAMES = tuple(s.value for s in Severity)


@dataclass(frozen=True)
class LogRecord:
    severity: Severity
    message: str
    timestamp: datetime


class Outcome(Enum):
    BAD_REQUEST = "bad_request"
    PARTIAL = "partial"
    OK = "ok"


@dataclass
class IngestResult:
    """Per-request result: severity name -> bytes enqueued, or -> error reason."""

    success: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.success and not self.errors

    def to_dict(self) -> dict:
        return {"success": dict(self.success), "errors": dict(self.errors)}
