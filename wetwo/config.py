"""Configuration loading for WeTwo.

Settings live in ``~/.config/wetwo/config.toml``; a template is written the
first time the CLI needs it.
"""

from pathlib import Path
from typing import Optional

import toml

from wetwo.engine.calendar import LocalCalendar
from wetwo.engine.insights import InsightRules

CONFIG_DIR = Path.home() / ".config" / "wetwo"
CONFIG_PATH = CONFIG_DIR / "config.toml"
DB_PATH = CONFIG_DIR / "wetwo.db"

TEMPLATE = {
    "backend": {
        "base_url": "https://wetwobackend-production.up.railway.app",
        "api_key": "",
        "timeout": 10.0,
    },
    "session": {
        "sign_in_timeout": 15.0,
        "clear_user_on_invalid": False,
    },
    "calendar": {
        "timezone": "",  # Empty uses the system time zone
        "first_weekday": 0,  # 0=Monday ... 6=Sunday
    },
    "trend": {
        "min_delta": 0.5,
    },
    "insights": {
        "low_band_below": 3.0,
        "high_band_above": 4.0,
    },
}


def load_config(path: Optional[Path] = None) -> Optional[dict]:
    """Load configuration.

    Returns:
        Config dict, or None if the file does not exist.

    Raises:
        ValueError: If the file is not valid TOML.
    """
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        return None
    try:
        return toml.load(config_path)
    except toml.TomlDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e


def create_template_config(path: Optional[Path] = None) -> Path:
    """Write the template configuration file."""
    config_path = path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        toml.dump(TEMPLATE, f)
    return config_path


def calendar_from_config(config: dict) -> LocalCalendar:
    section = config.get("calendar", {})
    return LocalCalendar.from_name(
        section.get("timezone") or None,
        first_weekday=int(section.get("first_weekday", 0)),
    )


def insight_rules_from_config(config: dict) -> InsightRules:
    return InsightRules.model_validate(config.get("insights", {}))


def trend_delta_from_config(config: dict) -> float:
    return float(config.get("trend", {}).get("min_delta", 0.5))
