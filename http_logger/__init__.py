"""HTTP error logger: accepts client error reports and appends them to a log file."""

__version__ = "1.0.0"
