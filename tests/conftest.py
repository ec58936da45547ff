"""Shared pytest fixtures for the http_logger test suite."""

import pytest

from http_logger.app import create_app
from http_logger.channel import IntakeChannel
from http_logger.config import Config
from http_logger.writer import LogWriter


@pytest.fixture
def log_path(tmp_path):
    return str(tmp_path / "logs" / "client.log")


@pytest.fixture
def channel():
    return IntakeChannel()


@pytest.fixture
def writer(channel, log_path):
    """A started writer; stopped (and drained) after the test."""
    w = LogWriter(channel, log_path)
    w.start()
    yield w
    w.stop()


@pytest.fixture
def config(log_path):
    return Config(host="127.0.0.1", port=0, log_path=log_path)


@pytest.fixture
def app(config, channel, writer):
    """Create a Flask test app."""
    application = create_app(config, channel, writer)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def read_lines():
    """Reader for the log file's lines, newline included."""
    def _read(path: str) -> list[str]:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.readlines()
    return _read
