# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""Configuration management for the Gmail MCP server."""

import logging
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Mapping, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gmail.googleapis.com/gmail/v1"

# Environment variable -> configuration key
ENVIRONMENT = {
    "GMAIL_API_KEY": "api_key",
    "GMAIL_USER_ID": "user_id",
}


@dataclass(frozen=True)
class Gmail:
    """Gmail MCP server configuration, read-only once built."""

    # Credentials. A missing key is reported by every tool call.
    api_key: Optional[str] = None
    user_id: str = "me"

    # Gmail API settings
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0

    # MCP settings
    mode: str = "stdio"

    # HTTP settings
    port: int = 63417
    addr: str = "localhost"

    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.mode not in ("http", "stdio"):
            raise ValueError(f"Invalid mode: {self.mode}. Must be 'http' or 'stdio'")

        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            raise ValueError(
                f"Invalid port: {self.port}. Must be integer between 1-65535"
            )

        if not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ValueError(
                f"Invalid timeout: {self.timeout}. Must be a positive number of seconds"
            )

        if not self.user_id:
            raise ValueError("Invalid user_id: must not be empty")

        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR")
        if self.log_level.upper() not in valid_levels:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {valid_levels}"
            )

        # frozen dataclass, so normalize through object.__setattr__
        object.__setattr__(self, "log_level", self.log_level.upper())

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


class Loader:
    """Handles loading and merging of configuration from files, environment and CLI arguments."""

    @staticmethod
    def load_config_file(config_file: str) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            config_file: Path to YAML configuration file

        Returns:
            Dictionary with configuration values

        Raises:
            ValueError: If config file doesn't exist or is invalid
        """
        config_path = Path(config_file).expanduser()
        if not config_path.exists():
            raise ValueError(f"Configuration file does not exist: {config_file}")

        try:
            with open(config_path, "r") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_file}: {e}")
        except OSError as e:
            raise ValueError(f"Failed to read configuration file {config_file}: {e}")

        if not isinstance(config, dict):
            raise ValueError(
                f"Invalid configuration file {config_file}: expected a mapping"
            )

        return Loader._process_config(config)

    @staticmethod
    def _process_config(config: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten nested gmail.*, mcp.* and http.* settings."""
        processed = {
            key: value
            for key, value in config.items()
            if key not in ("gmail", "mcp", "http")
        }

        gmail = config.get("gmail")
        if isinstance(gmail, dict):
            for key in ("api_key", "user_id", "base_url", "timeout"):
                if key in gmail:
                    processed[key] = gmail[key]

        mcp = config.get("mcp")
        if isinstance(mcp, dict) and "mode" in mcp:
            processed["mode"] = mcp["mode"]

        http = config.get("http")
        if isinstance(http, dict):
            if "port" in http:
                processed["port"] = http["port"]
            if "addr" in http:
                processed["addr"] = http["addr"]

        return processed

    @staticmethod
    def load_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Read GMAIL_API_KEY and GMAIL_USER_ID from the environment."""
        if environ is None:
            environ = os.environ

        values = {}
        for variable, key in ENVIRONMENT.items():
            if environ.get(variable):
                values[key] = environ[variable]
        return values

    @staticmethod
    def merge_with_cli_args(config: Dict[str, Any], **cli_args) -> Dict[str, Any]:
        """Merge configuration with CLI arguments, with CLI taking precedence.

        Args:
            config: Configuration dictionary from file and environment
            **cli_args: CLI arguments as keyword arguments

        Returns:
            Merged configuration with CLI args overriding earlier values
        """
        merged = config.copy()

        # CLI args override config values (skip None values)
        for key, value in cli_args.items():
            if value is not None:
                merged[key] = value

        return merged

    @staticmethod
    def create(**kwargs) -> Gmail:
        """Create a Gmail config instance from keyword arguments.

        Raises:
            ValueError: If parameters are invalid
        """
        return Gmail(
            api_key=kwargs.get("api_key"),
            user_id=kwargs.get("user_id", "me"),
            base_url=kwargs.get("base_url", DEFAULT_BASE_URL),
            timeout=kwargs.get("timeout", 30.0),
            mode=kwargs.get("mode", "stdio"),
            port=kwargs.get("port", 63417),
            addr=kwargs.get("addr", "localhost"),
            log_level=kwargs.get("log_level", "INFO"),
        )

    @classmethod
    def from_file_and_cli(
        cls,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        **cli_args,
    ) -> Gmail:
        """Load configuration from file, environment and CLI arguments.

        Precedence is CLI arguments, then environment, then the file.

        Args:
            config_file: Optional path to YAML configuration file
            environ: Environment to read, defaults to os.environ
            **cli_args: CLI arguments to override other values

        Returns:
            Gmail instance

        Raises:
            ValueError: If configuration is invalid
        """
        config = {}

        if config_file:
            config = cls.load_config_file(config_file)

        config.update(cls.load_environment(environ))

        merged_config = cls.merge_with_cli_args(config, **cli_args)

        settings = cls.create(**merged_config)
        if not settings.has_api_key:
            logger.warning("GMAIL_API_KEY is not set; every tool call will fail")
        return settings
