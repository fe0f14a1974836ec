"""Configuration management for formula-deps."""

from pathlib import Path
from typing import Any, Optional
import yaml


class Config:
    """Configuration manager with lazy loading and defaults."""

    _instance: Optional["Config"] = None
    _config: dict = {}

    DEFAULT_CONFIG = {
        "connectors": {
            "color": "#ff00ff",
            "alpha": 200,
            "shape": "cubic_curve",
            "width": 2,
            "label_font_family": "SansSerif",
            "label_font_size": 12
        },
        "logging": {
            "level": "INFO",
            "file": None
        },
        "server": {
            "host": "127.0.0.1",
            "port": 5000
        }
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def load(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from YAML file."""
        if config_path is None:
            config_path = Path(__file__).parents[3] / "config" / "config.yaml"

        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value using dot notation (e.g., 'connectors.width')."""
        if not self._config:
            self.load()

        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                # Try default config
                default_value = self.DEFAULT_CONFIG
                for dk in keys:
                    if isinstance(default_value, dict) and dk in default_value:
                        default_value = default_value[dk]
                    else:
                        return default
                return default_value

        return value

    @property
    def log_level(self) -> str:
        """Get configured log level."""
        return self.get("logging.level", "INFO")

    @property
    def log_file(self) -> Optional[Path]:
        """Get configured log file, if any."""
        log_file = self.get("logging.file")
        return Path(log_file) if log_file else None


# Global config instance
config = Config()
