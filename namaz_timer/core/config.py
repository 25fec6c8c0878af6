import copy
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "location": {
        "latitude": None,
        "longitude": None,
        "utc_offset": None,  # hours added to UTC; null follows this machine's clock
    },
    "source": {
        "backend": "astronomical",  # astronomical | aladhan
        "base_url": "https://api.aladhan.com/v1",
        "method": 2,
        "school": 0,
        "timeout": 10,
    },
    "cache": {
        "directory": "~/.namaz_timer/cache",
        "coordinate_precision": 2,
        "max_age_days": 7,  # null keeps cached timings forever
    },
    "database": {
        "enabled": True,
        "path": "~/.namaz_timer/namaz_timer.db",
    },
    "api": {
        "host": "127.0.0.1",
        "port": 8765,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}


class Config:
    """YAML configuration with .env loading and ${VAR} substitution.

    Pass data to skip the file entirely (tests, embedding).
    """

    def __init__(self, config_path: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        logging.debug("Initializing Config class")

        if data is not None:
            self.config_file = None
            self.config_dir = Path.cwd()
            self.data = self._merge_defaults(self._substitute_env_vars(data))
            return

        if config_path:
            self.config_file = Path(config_path).expanduser().resolve()
            self.config_dir = self.config_file.parent
        else:
            self.config_dir = Path.home() / ".namaz_timer"
            self.config_file = self.config_dir / "config.yaml"

        logging.debug(f"Using config file: {self.config_file}")

        # Load environment variables from .env file
        self._load_env_file()

        self._ensure_config_exists()
        self._load_config()

    def section(self, name: str) -> Dict[str, Any]:
        """Return a config section; missing keys are filled from defaults."""
        merged = dict(DEFAULT_CONFIG.get(name, {}))
        merged.update(self.data.get(name) or {})
        return merged

    def get(self, name: str, key: str, default: Any = None) -> Any:
        return self.section(name).get(key, default)

    def _ensure_config_exists(self) -> None:
        """Create default config if it doesn't exist"""
        if not self.config_dir.exists():
            logging.info(f"Creating config directory: {self.config_dir}")
            self.config_dir.mkdir(parents=True)

        if not self.config_file.exists():
            logging.info(f"Creating default config file: {self.config_file}")
            self.config_file.write_text(yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False))

    def _load_env_file(self) -> None:
        """Load environment variables from .env file"""
        env_files = [
            self.config_dir / ".env",
            self.config_dir.parent / ".env",
            Path.cwd() / ".env",
        ]

        env_file = None
        for path in env_files:
            if path.exists():
                env_file = path
                break

        if not env_file:
            logging.debug("No .env file found, skipping environment variable loading")
            return

        logging.info(f"Loading environment variables from: {env_file}")
        try:
            with open(env_file, "r") as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue

                    # KEY=VALUE
                    match = re.match(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$", line)
                    if match:
                        key, value = match.groups()
                        value = value.strip('"').strip("'")
                        # Never override the real environment
                        if key not in os.environ:
                            os.environ[key] = value
                            logging.debug(f"Loaded env var: {key}")
        except OSError as e:
            logging.warning(f"Error loading .env file: {e}")

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute environment variables in config data"""
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str):
            # ${VAR_NAME} or $VAR_NAME
            if data.startswith("${") and data.endswith("}"):
                return os.environ.get(data[2:-1], data)
            elif data.startswith("$") and len(data) > 1:
                return os.environ.get(data[1:], data)
            return data
        else:
            return data

    def _merge_defaults(self, data: Dict[str, Any]) -> Dict[str, Any]:
        merged = copy.deepcopy(DEFAULT_CONFIG)
        for name, value in data.items():
            if isinstance(value, dict) and isinstance(merged.get(name), dict):
                merged[name].update(value)
            else:
                merged[name] = value
        return merged

    def _load_config(self) -> None:
        """Load configuration from file"""
        try:
            logging.debug(f"Loading config from: {self.config_file}")
            with open(self.config_file) as f:
                new_data = yaml.safe_load(f) or {}

            if not isinstance(new_data, dict):
                raise ValueError("Invalid config format: root must be a dictionary")

            self.data = self._merge_defaults(self._substitute_env_vars(new_data))
            logging.debug(f"Loaded config data: {self.data}")

        except (OSError, ValueError, yaml.YAMLError) as e:
            logging.error(f"Error loading config: {e}")
            logging.info("Using default configuration")
            self.data = copy.deepcopy(DEFAULT_CONFIG)
