import os
import re
import logging
from dataclasses import dataclass, field
from typing import Optional, Any

import toml

logger = logging.getLogger(__name__)

# Default timeout for provider requests, in seconds.
DEFAULT_TIMEOUT = 30.0

# Environment variable overriding the default timeout.
TIMEOUT_ENV_VAR = "HOWTO_TIMEOUT"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """
    Parses a duration string such as "45s", "2m", "1m30s" or "1.5h".

    Args:
        value: The duration string. A unit is required for every number,
               except for a plain "0".

    Returns:
        The duration in seconds.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    text = value.strip()
    sign = 1.0
    if text[:1] in ("+", "-"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    if text == "0":
        return 0.0
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            raise ValueError(f"invalid duration {value!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position != len(text):
        raise ValueError(f"invalid duration {value!r}")

    return sign * total


def get_timeout(flag_timeout: Optional[float] = None, fallback: float = DEFAULT_TIMEOUT) -> float:
    """
    Resolves the request timeout in seconds.

    An explicit flag value wins, then the HOWTO_TIMEOUT environment variable,
    then the fallback. Invalid or non-positive environment values are ignored.
    """
    if flag_timeout is not None and flag_timeout > 0:
        return flag_timeout

    env_timeout = os.environ.get(TIMEOUT_ENV_VAR, "")
    if env_timeout:
        try:
            seconds = parse_duration(env_timeout)
        except ValueError:
            logger.info(f"Ignoring invalid {TIMEOUT_ENV_VAR} value: {env_timeout!r}")
        else:
            if seconds > 0:
                return seconds

    return fallback


def _default_config_file() -> str:
    return os.environ.get(
        "HOWTO_CONFIG",
        os.path.join(os.path.expanduser("~/.config/howto"), "config.toml"),
    )


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass
class Config:
    """Configuration handler for the CLI tool."""

    provider: Optional[str] = None
    model: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False
    log_dir: Optional[str] = None
    config_file: str = field(default_factory=_default_config_file)
    _file_config: dict = field(init=False, repr=False)

    def __post_init__(self):
        """Post-initialization to resolve values from the environment and the config file."""
        self.config_file = os.path.expanduser(self.config_file)
        self._file_config = self._load_config_from_file()
        self.provider = self._get_config("HOWTO_PROVIDER", self.provider) or None
        self.model = self._get_config("HOWTO_MODEL", self.model) or None
        self.verbose = _as_bool(self._get_config("HOWTO_VERBOSE", self.verbose))
        log_dir = self._get_config("HOWTO_LOG_DIR", self.log_dir)
        self.log_dir = os.path.expanduser(str(log_dir)) if log_dir else None

        # The environment variable is applied later by get_timeout, so only
        # the config file is consulted here.
        file_timeout = self._get_file_value(TIMEOUT_ENV_VAR)
        if file_timeout is not None:
            try:
                seconds = parse_duration(str(file_timeout))
            except ValueError:
                logger.warning(f"Ignoring invalid {TIMEOUT_ENV_VAR} in {self.config_file}: {file_timeout!r}")
            else:
                if seconds > 0:
                    self.timeout = seconds

    def _load_config_from_file(self) -> dict:
        """Loads configuration from the TOML file, if there is one."""
        if not os.path.isfile(self.config_file):
            return {}
        try:
            with open(self.config_file, 'r') as f:
                return toml.load(f)
        except (toml.TomlDecodeError, IOError) as e:
            logger.warning(f"Could not read config file at {self.config_file}: {e}")
            return {}

    def _get_file_value(self, key: str) -> Optional[Any]:
        if key in self._file_config and not isinstance(self._file_config[key], dict):
            return self._file_config[key]
        for section in self._file_config.values():
            if isinstance(section, dict) and key in section:
                return section[key]
        return None

    def _get_config(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Get a configuration value, prioritizing environment variables,
        then the config file, and finally a default value.
        """
        # 1. Check environment variable
        value = os.environ.get(key)
        if value is not None:
            return value

        # 2. Check config file
        value = self._get_file_value(key)
        if value is not None:
            return value

        # 3. Return default
        return default

    def __str__(self) -> str:
        """Return string representation of the configuration."""
        config_dict = self.__dict__.copy()
        del config_dict['_file_config']  # Don't print the raw file contents
        return str(config_dict)
