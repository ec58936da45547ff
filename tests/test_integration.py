"""End-to-end tests: concurrent clients through the whole ingestion pipeline."""

import logging
import signal
import threading

import pytest
from flask import Flask

from http_logger import main as main_module
from http_logger.formatter import parse_line
from http_logger.models import Severity


class TestConcurrentIngestion:
    def test_every_line_written_exactly_once(self, app, writer, log_path, read_lines):
        """8 threads x 25 requests = 200 lines, no loss or duplication."""
        errors = []

        def client_thread(tid):
            client = app.test_client()
            for i in range(25):
                resp = client.post("/log/", data={"error": f"client-{tid}-msg-{i}"})
                if resp.status_code != 200:
                    errors.append(resp.status_code)

        threads = [threading.Thread(target=client_thread, args=(t,)) for t in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        writer.stop()

        assert errors == []
        records = [parse_line(line) for line in read_lines(log_path)]
        messages = [r.message for r in records]
        assert len(messages) == 200
        assert set(messages) == {f"client-{t}-msg-{i}" for t in range(8) for i in range(25)}
        assert all(r.severity is Severity.ERROR for r in records)

    def test_requests_after_writer_stopped_are_partial(self, client, writer, log_path, read_lines):
        assert client.post("/log/", data={"info": "before"}).status_code == 200
        writer.stop()

        resp = client.post("/log/", data={"info": "after", "debug": "after"})
        assert resp.status_code == 206
        assert set(resp.get_json()["errors"]) == {"info", "debug"}
        assert len(read_lines(log_path)) == 1


@pytest.fixture
def restore_process_state():
    root = logging.getLogger()
    level = root.level
    handler = signal.getsignal(signal.SIGTERM)
    yield
    root.setLevel(level)
    signal.signal(signal.SIGTERM, handler)


class TestMain:
    def test_unopenable_log_file_is_fatal(self, tmp_path, caplog, restore_process_state):
        caplog.set_level(logging.CRITICAL, logger="http_logger.main")
        assert main_module.main(["127.0.0.1:0", str(tmp_path)]) == 1
        assert "Unable to open log file" in caplog.text

    def test_serves_then_drains_writer(self, tmp_path, monkeypatch, restore_process_state, read_lines):
        log_path = str(tmp_path / "client.log")
        served = {}

        def fake_run(self, host=None, port=None, **options):
            served["host"], served["port"] = host, port
            with self.test_client() as client:
                client.post("/log/", data={"warning": "from main"})

        monkeypatch.setattr(Flask, "run", fake_run)
        assert main_module.main(["127.0.0.1:0", log_path]) == 0

        assert served == {"host": "127.0.0.1", "port": 0}
        lines = read_lines(log_path)
        assert len(lines) == 1
        assert lines[0].endswith("[WARNING] from main\n")

    def test_bad_arguments_exit_with_usage(self, capsys, restore_process_state):
        with pytest.raises(SystemExit) as exc_info:
            main_module.main(["not-an-address"])
        assert exc_info.value.code == 2
        assert "usage:" in capsys.readouterr().err
