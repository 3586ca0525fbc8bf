"""
Configuration management for the Forge Deployment Monitor.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from errors import ConfigurationError

REQUIRED_ENV_VARS = (
    "FORGE_API_TOKEN",
    "FORGE_ORGANIZATION",
    "FORGE_SERVER_ID",
    "FORGE_SITE_ID",
)


@dataclass
class MonitorConfig:
    """Configuration for a deployment monitoring session."""

    api_token: str
    organization: str
    server_id: str
    site_id: str
    timeout: int = 600
    poll_interval: int = 10
    verbose: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MonitorConfig":
        """
        Create configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            MonitorConfig instance

        Raises:
            ConfigurationError: Listing every missing or invalid variable
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
        invalid = []

        def get_int(key: str, default: int) -> int:
            raw = env.get(key, "")
            if not raw:
                return default
            try:
                value = int(raw)
            except ValueError:
                invalid.append(f"{key}={raw!r}")
                return default
            if value <= 0:
                invalid.append(f"{key}={raw!r}")
                return default
            return value

        timeout = get_int("FORGE_TIMEOUT", cls.timeout)
        poll_interval = get_int("FORGE_POLL_INTERVAL", cls.poll_interval)

        if missing or invalid:
            raise ConfigurationError(missing, invalid)

        return cls(
            api_token=env["FORGE_API_TOKEN"],
            organization=env["FORGE_ORGANIZATION"],
            server_id=env["FORGE_SERVER_ID"],
            site_id=env["FORGE_SITE_ID"],
            timeout=timeout,
            poll_interval=poll_interval,
        )

    def apply_args(self, args) -> "MonitorConfig":
        """
        Layer command-line overrides on top of this configuration.

        Args:
            args: Parsed argparse arguments

        Returns:
            self, for chaining

        Raises:
            ConfigurationError: If an override is not a positive integer
        """
        invalid = []
        overrides = (("timeout", "--timeout"), ("poll_interval", "--poll-interval"))
        for name, flag in overrides:
            value = getattr(args, name, None)
            if value is None:
                continue
            if value <= 0:
                invalid.append(f"{flag}={value!r}")
                continue
            setattr(self, name, value)
        if invalid:
            raise ConfigurationError([], invalid)

        self.verbose = bool(getattr(args, "verbose", False))
        self.log_file = getattr(args, "log_file", None)
        return self
