# Config
"""
Configuration for the trout stocking loader.

Settings are read from an optional appsettings.json file and then from the
process environment (including a local .env file), with environment values
taking precedence.
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import load_dotenv

from trout_loader.utils.errors import ConfigurationError, MissingConfigurationError

DEFAULT_CONFIG_FILE = Path("appsettings.json")

# Plain or schema-qualified identifier, e.g. "weekly_trout_stocking" or "dbo.weekly_trout_stocking"
_TABLE_NAME_RX = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings:
    # Logging
    log_level = "INFO"
    log_file: Optional[Path] = None
    dev_mode = False

    # Report source
    pdf_url = ""
    user_agent = "GaTroutStockingLoader/1.0"
    http_timeout_seconds = 60.0

    # Stocking store (PostgreSQL)
    database_url = ""
    stocking_table = "weekly_trout_stocking"

    def __init__(self, config_file: Optional[Union[str, Path]] = None, **overrides: Any) -> None:
        load_dotenv()

        self.config_file = self._resolve_config_file(config_file)
        if self.config_file is not None:
            self._apply_file(self.config_file)

        self._apply_env()

        for key, value in overrides.items():
            if not hasattr(Settings, key):
                raise ConfigurationError(f"Unknown setting '{key}'")
            setattr(self, key, value)

    @staticmethod
    def _resolve_config_file(config_file: Optional[Union[str, Path]]) -> Optional[Path]:
        if config_file:
            path = Path(config_file)
            if not path.is_file():
                raise ConfigurationError(f"Configuration file not found: {path}", {"path": str(path)})
            return path

        env_path = os.getenv("TROUT_CONFIG_FILE")
        if env_path:
            path = Path(env_path)
            if not path.is_file():
                raise ConfigurationError(f"Configuration file not found: {path}", {"path": str(path)})
            return path

        return DEFAULT_CONFIG_FILE if DEFAULT_CONFIG_FILE.is_file() else None

    def _apply_file(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}", {"path": str(path)})

        values = parse_config_json(data)
        for key, value in values.items():
            setattr(self, key, value)

    def _apply_env(self) -> None:
        env = os.environ

        if "PDF_URL" in env:
            self.pdf_url = env["PDF_URL"]
        if "DATABASE_URL" in env:
            self.database_url = env["DATABASE_URL"]
        if "STOCKING_TABLE" in env:
            self.stocking_table = env["STOCKING_TABLE"]
        if "HTTP_USER_AGENT" in env:
            self.user_agent = env["HTTP_USER_AGENT"]
        if "HTTP_TIMEOUT_SECONDS" in env:
            try:
                self.http_timeout_seconds = float(env["HTTP_TIMEOUT_SECONDS"])
            except ValueError:
                raise ConfigurationError(
                    "HTTP_TIMEOUT_SECONDS must be a number",
                    {"value": env["HTTP_TIMEOUT_SECONDS"]},
                )
        if "LOG_LEVEL" in env:
            self.log_level = env["LOG_LEVEL"].upper()
        if env.get("LOG_FILE"):
            self.log_file = Path(env["LOG_FILE"])
        if "DEV_MODE" in env:
            self.dev_mode = env["DEV_MODE"].strip().lower() in _TRUE_VALUES

    def validate(self) -> "Settings":
        """
        Check that the pipeline can start with these settings.

        Raises:
            MissingConfigurationError: If the report URL or connection string is blank
            ConfigurationError: For malformed values
        """
        missing = []
        if not (self.pdf_url or "").strip():
            missing.append("PdfUrl")
        if not (self.database_url or "").strip():
            missing.append("ConnectionStrings:Sql")
        if missing:
            raise MissingConfigurationError(missing)

        if not _TABLE_NAME_RX.match(self.stocking_table or ""):
            raise ConfigurationError(
                f"Invalid stocking table name '{self.stocking_table}'",
                {"stocking_table": self.stocking_table},
            )

        if self.http_timeout_seconds <= 0:
            raise ConfigurationError("HTTP timeout must be positive")

        return self

    def get_log_file_path(self) -> Optional[Path]:
        return self.log_file


def parse_config_json(data: Any) -> dict[str, Any]:
    """
    Map an appsettings.json document onto setting names.

    Recognised keys are ``PdfUrl``, ``ConnectionStrings.Sql`` and
    ``StockingTable``; key lookup is case-insensitive. Unknown keys are ignored.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must contain a JSON object")

    def lookup(mapping: dict, key: str) -> Any:
        for k, v in mapping.items():
            if isinstance(k, str) and k.lower() == key.lower():
                return v
        return None

    values: dict[str, Any] = {}

    pdf_url = lookup(data, "PdfUrl")
    if isinstance(pdf_url, str):
        values["pdf_url"] = pdf_url

    connection_strings = lookup(data, "ConnectionStrings")
    if isinstance(connection_strings, dict):
        sql = lookup(connection_strings, "Sql")
        if isinstance(sql, str):
            values["database_url"] = sql

    table = lookup(data, "StockingTable")
    if isinstance(table, str):
        values["stocking_table"] = table

    return values


# Singleton instance
_settings = None

def get_settings(config_file: Optional[Union[str, Path]] = None) -> Settings:
    global _settings
    if _settings is None or config_file is not None:
        _settings = Settings(config_file=config_file)
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
