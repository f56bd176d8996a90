"""Configuration — frozen dataclass from defaults <- YAML file <- env vars <- CLI args."""

import codecs
import logging
import os
from dataclasses import dataclass

import yaml

from logwatcher.errors import ConfigError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _optional_int(value) -> int | None:
    if value is None or str(value).strip().lower() in ("", "none"):
        return None
    return int(value)


@dataclass(frozen=True)
class Config:
    log_file: str = "/var/log/app.log"
    poll_interval: float = 1.0
    encoding: str = "utf-8"
    missing_file_limit: int | None = None  # None = wait for recreation forever
    max_lines: int | None = None
    read_limit: int | None = 1024 * 1024  # bytes consumed per poll; None = to EOF
    log_level: str = "INFO"

    def __post_init__(self):
        if self.poll_interval <= 0:
            raise ConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        try:
            codecs.lookup(self.encoding)
            newline = "\n".encode(self.encoding)
        except (LookupError, UnicodeError) as e:
            raise ConfigError(f"Unknown encoding: {self.encoding}") from e
        if newline != b"\n":
            raise ConfigError(f"Encoding {self.encoding} does not use a single-byte newline")
        if self.read_limit is not None and self.read_limit < 1:
            raise ConfigError("read_limit must be at least 1")
        if self.missing_file_limit is not None and self.missing_file_limit < 0:
            raise ConfigError("missing_file_limit must not be negative")
        if self.max_lines is not None and self.max_lines < 1:
            raise ConfigError("max_lines must be at least 1")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")


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
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(cli_args=None, yaml_data: dict | None = None) -> Config:
    """Build Config; CLI args (an argparse namespace) win over env vars over YAML."""
    yaml_data = yaml_data or {}

    def pick(name: str, env_var: str, default):
        value = yaml_data.get(name, default)
        value = os.environ.get(env_var, value)
        cli_value = getattr(cli_args, name, None)
        if cli_value is not None:
            value = cli_value
        return value

    try:
        return Config(
            log_file=str(pick("log_file", "LOG_FILE", Config.log_file)),
            poll_interval=float(pick("poll_interval", "POLL_INTERVAL", Config.poll_interval)),
            encoding=str(pick("encoding", "ENCODING", Config.encoding)),
            missing_file_limit=_optional_int(
                pick("missing_file_limit", "MISSING_FILE_LIMIT", Config.missing_file_limit)
            ),
            max_lines=_optional_int(pick("max_lines", "MAX_LINES", Config.max_lines)),
            read_limit=_optional_int(pick("read_limit", "READ_LIMIT", Config.read_limit)),
            log_level=str(pick("log_level", "LOG_LEVEL", Config.log_level)).upper(),
        )
    except (TypeError, ValueError) as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"Invalid configuration value: {e}") from e
