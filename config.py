"""
Configuration and shared settings for the theme library transfer engine.
"""

import logging
import os
import yaml
from pathlib import Path
from typing import Optional
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

# Snapshot format
SNAPSHOT_FORMAT_VERSION = "1.0"
SUPPORTED_FORMAT_VERSIONS = ("1.0",)

# Appended to the name of an imported theme/group resolved as CREATE_DUPLICATE
DUPLICATE_SUFFIX = " (copie)"

DEFAULT_COLOR = "#3B82F6"
EXPORT_FILE_PREFIX = "extracts-export"

CONFIG_FILE = Path(os.environ.get("LIBRARY_CONFIG", "library.yaml"))


@dataclass
class Settings:
    """
    Runtime settings.

    Resolution order: environment > YAML config file > defaults.
    """
    data_dir: Path = Path("data")
    backend: str = "json"  # 'json' | 'memory'
    log_level: str = "INFO"
    web_port: int = 5002
    duplicate_suffix: str = DUPLICATE_SUFFIX


def _load_config_file(path: Path) -> dict:
    """Load the optional YAML config file."""
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """Build settings from defaults, the YAML file and the environment."""
    file_cfg = _load_config_file(config_file or CONFIG_FILE)
    settings = Settings()

    if "data_dir" in file_cfg:
        settings.data_dir = Path(file_cfg["data_dir"])
    if "backend" in file_cfg:
        settings.backend = str(file_cfg["backend"])
    if "log_level" in file_cfg:
        settings.log_level = str(file_cfg["log_level"]).upper()
    if "web_port" in file_cfg:
        settings.web_port = int(file_cfg["web_port"])
    if "duplicate_suffix" in file_cfg:
        settings.duplicate_suffix = str(file_cfg["duplicate_suffix"])

    # Environment overrides
    if os.environ.get("LIBRARY_DATA_DIR"):
        settings.data_dir = Path(os.environ["LIBRARY_DATA_DIR"])
    if os.environ.get("LIBRARY_BACKEND"):
        settings.backend = os.environ["LIBRARY_BACKEND"]
    if os.environ.get("LIBRARY_LOG_LEVEL"):
        settings.log_level = os.environ["LIBRARY_LOG_LEVEL"].upper()
    if os.environ.get("LIBRARY_WEB_PORT"):
        settings.web_port = int(os.environ["LIBRARY_WEB_PORT"])

    return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def setup_logging(level: Optional[str] = None, handler: Optional[logging.Handler] = None) -> None:
    """Configure the root logger once."""
    level = (level or get_settings().log_level).upper()
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
