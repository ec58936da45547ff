"""Configuration loading from CLI args, env vars, and optional YAML file."""

import argparse
import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    host: str = "127.0.0.1"
    port: int = 3000
    log_path: str = "http_logger.log"
    serve_help: bool = False
    remap_bad_request: bool = False
    log_level: str = "INFO"


def parse_address(value: str) -> tuple[str, int]:
    """Split ``host:port`` into (host, port). Raises ValueError if malformed."""
    host, sep, port_str = value.rpartition(":")
    if not sep or not host or not port_str:
        raise ValueError(f"expected HOST:PORT, got {value!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"invalid port {port_str!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"port {port} out of range")
    return host, port


def _address_arg(value: str) -> tuple[str, int]:
    try:
        return parse_address(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="http-logger",
        description="Listens on ADDRESS and appends POST requests to /log/ "
                    "into the log file.",
    )
    parser.add_argument(
        "address", metavar="ADDRESS", type=_address_arg,
        help="HOST:PORT to listen on (e.g. localhost:3000)",
    )
    parser.add_argument(
        "log_path", metavar="LOG",
        help="Path to the log file",
    )
    parser.add_argument(
        "--api-help", dest="serve_help", action="store_true", default=None,
        help="Serve an API help page on / instead of 403 Forbidden",
    )
    parser.add_argument(
        "--remap-bad-request", action="store_true", default=None,
        help="Answer 200 instead of 400 for requests without log fields",
    )
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, type=str.upper, default=None,
        help="Level for the server's own diagnostic output (default: INFO)",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to an optional YAML config file",
    )
    return parser


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(argv: list[str] | None = None) -> Config:
    """Build Config from defaults <- YAML <- env vars <- CLI args (highest priority).

    Malformed or missing arguments print usage and exit via argparse.
    """
    args = build_cli_parser().parse_args(argv)
    yaml_data = load_yaml_config(args.config)
    host, port = args.address

    serve_help = _parse_bool(yaml_data.get("api_help", Config.serve_help))
    remap = _parse_bool(yaml_data.get("remap_bad_request", Config.remap_bad_request))
    log_level = str(yaml_data.get("log_level", Config.log_level)).upper()

    if "HTTP_LOGGER_API_HELP" in os.environ:
        serve_help = _parse_bool(os.environ["HTTP_LOGGER_API_HELP"])
    if "HTTP_LOGGER_REMAP_BAD_REQUEST" in os.environ:
        remap = _parse_bool(os.environ["HTTP_LOGGER_REMAP_BAD_REQUEST"])
    log_level = os.environ.get("HTTP_LOGGER_LOG_LEVEL", log_level).upper()

    if args.serve_help is not None:
        serve_help = args.serve_help
    if args.remap_bad_request is not None:
        remap = args.remap_bad_request
    if args.log_level is not None:
        log_level = args.log_level

    if log_level not in LOG_LEVELS:
        logger.warning("Unknown log level %r, falling back to INFO", log_level)
        log_level = "INFO"

    return Config(
        host=host,
        port=port,
        log_path=args.log_path,
        serve_help=serve_help,
        remap_bad_request=remap,
        log_level=log_level,
    )
