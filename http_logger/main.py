"""Entry point for the HTTP error logger server."""

import logging
import signal
import sys

from http_logger.app import create_app
from http_logger.channel import IntakeChannel
from http_logger.config import load_config
from http_logger.errors import LogFileError
from http_logger.writer import LogWriter

logger = logging.getLogger(__name__)


def _signal_handler(signum, frame):
    logger.info("Received signal %d, shutting down...", signum)
    raise KeyboardInterrupt


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = load_config(argv)
    logging.getLogger().setLevel(config.log_level)

    channel = IntakeChannel()
    try:
        writer = LogWriter(channel, config.log_path)
    except LogFileError as exc:
        logger.critical("%s", exc)
        return 1
    writer.start()

    signal.signal(signal.SIGTERM, _signal_handler)

    app = create_app(config, channel, writer)
    logger.info("Listening on %s:%d, writing to %s (api help %s)",
                config.host, config.port, config.log_path,
                "on" if config.serve_help else "off")
    try:
        app.run(host=config.host, port=config.port, threaded=True, use_reloader=False)
    except KeyboardInterrupt:
        pass
    finally:
        writer.stop()
        logger.info("Stats: %d line(s) written, %d failed", writer.written, writer.failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
