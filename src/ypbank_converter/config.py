"""Configuration management for ypbank-converter."""

import json
import os
from pathlib import Path
from typing import Any

from ypbank_converter.errors import StatementIOError

# Default config filenames
CONFIG_FILENAME = "config.json"
LOCAL_CONFIG_FILENAME = "ypbank.json"

# ISO 4217 code for "no currency"
DEFAULT_CURRENCY = "XXX"
DEFAULT_CSV_CURRENCY = "RUB"
DEFAULT_CSV_DELIMITER = ","
DEFAULT_CSV_DATE_FORMAT = "%d.%m.%Y"


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "ypbank-converter"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. ypbank.json in current directory
    2. XDG config: ~/.config/ypbank-converter/config.json
    """
    config_paths = [
        Path(LOCAL_CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file.

    Raises:
        StatementIOError: If the file cannot be read or is not valid JSON
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            return json.load(f)  # type: ignore[no-any-return]
    except OSError as e:
        raise StatementIOError(e) from e
    except json.JSONDecodeError as e:
        raise StatementIOError(OSError(f"Invalid config file {config_path}: {e}")) from e


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to a JSON config file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def get_default_currency(config: dict[str, Any] | None = None) -> str:
    """Currency used when a document does not name one."""
    if config and config.get("default_currency"):
        return str(config["default_currency"]).upper()
    return DEFAULT_CURRENCY


def _csv_section(config: dict[str, Any] | None) -> dict[str, Any]:
    if not config:
        return {}
    return config.get("csv") or {}


def get_csv_currency(config: dict[str, Any] | None = None) -> str:
    """Currency assigned to every row of a CSV statement."""
    if currency := _csv_section(config).get("currency"):
        return str(currency).upper()
    return DEFAULT_CSV_CURRENCY


def get_csv_delimiter(config: dict[str, Any] | None = None) -> str:
    """Field delimiter for CSV input and output."""
    delimiter = _csv_section(config).get("delimiter")
    if delimiter == "\\t":
        return "\t"
    return str(delimiter) if delimiter else DEFAULT_CSV_DELIMITER


def get_csv_date_format(config: dict[str, Any] | None = None) -> str:
    """strftime pattern used for dates in CSV output."""
    return str(_csv_section(config).get("date_format") or DEFAULT_CSV_DATE_FORMAT)
