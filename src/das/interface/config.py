"""
Runtime configuration persistence.

Retention limits and alert policy are stored in a JSON file next to the
campaigns. The CONFIG command never writes here; it only echoes.
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)


class Config(TypedDict, total=False):
    """Runtime configuration."""
    audit_log_limit: int  # Dispatcher audit ring buffer size
    context_history_limit: int  # Snapshots kept by the context builder
    mission_log_limit: int  # Mission log ring buffer size
    alert_stands_down_critical: bool  # Let ALERT/keywords lower CRITICAL
    recent_actions: int  # Audit entries shown by STATUS
    log_level: str  # DEBUG, INFO, WARNING, ERROR


DEFAULT_CONFIG: Config = {
    "audit_log_limit": 100,
    "context_history_limit": 50,
    "mission_log_limit": 200,
    "alert_stands_down_critical": False,
    "recent_actions": 5,
    "log_level": "WARNING",
}


def get_config_path(campaigns_dir: Path | str = "campaigns") -> Path:
    """Location of the DAS settings file inside the campaigns directory."""
    return Path(campaigns_dir) / ".das_config.json"


def load_config(campaigns_dir: Path | str = "campaigns") -> Config:
    """Saved settings over the defaults. A missing or unreadable file gives the defaults."""
    path = get_config_path(campaigns_dir)

    if not path.exists():
        return DEFAULT_CONFIG.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
        # Keys this version doesn't know are dropped
        config = DEFAULT_CONFIG.copy()
        config.update({k: v for k, v in saved.items() if k in DEFAULT_CONFIG})
        return config
    except (json.JSONDecodeError, IOError, AttributeError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return DEFAULT_CONFIG.copy()


def save_config(config: Config, campaigns_dir: Path | str = "campaigns") -> bool:
    """Write settings as JSON. Returns False (and logs) when the write fails."""
    path = get_config_path(campaigns_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except IOError as e:
        logger.error(f"Could not save config {path}: {e}")
        return False


def set_log_level(level: str, campaigns_dir: Path | str = "campaigns") -> None:
    """Save log level preference."""
    config = load_config(campaigns_dir)
    config["log_level"] = level.upper()
    save_config(config, campaigns_dir)


def set_alert_stand_down(enabled: bool, campaigns_dir: Path | str = "campaigns") -> None:
    """Save whether ALERT and anomaly keywords may lower CRITICAL."""
    config = load_config(campaigns_dir)
    config["alert_stands_down_critical"] = enabled
    save_config(config, campaigns_dir)
