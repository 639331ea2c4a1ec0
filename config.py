# cfgcases/config.py
import os
import json
from typing import Any, Dict, Optional

DEFAULT_MAX_DEPTH = 20
APP_DIR_NAME = ".cfgcases"


class ConfigError(Exception):
    """Custom exception for configuration load/save errors."""
    pass


def default_config() -> Dict[str, Any]:
    return {
        "max_depth": DEFAULT_MAX_DEPTH,
        "valid_count": 5,
        "invalid_count": 5,
        "extreme_per_kind": 1,
        "seed": None,
        "identifier": "id",
        "grammar": "arithmetic",
        "grammar_file": None,
        "output_dir": "~/.cfgcases/reports",
        "log_level": "INFO",
        "tui": False,
    }


class GeneratorConfig:
    def __init__(self, app_dir: Optional[str] = None, **kwargs):
        data = default_config()
        data.update(kwargs)
        data["output_dir"] = os.path.expanduser(data["output_dir"])
        if data["grammar_file"]:
            data["grammar_file"] = os.path.expanduser(data["grammar_file"])
        self._data = data
        self._app_dir = app_dir

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._data:
            return self._data[name]
        raise AttributeError(f"'GeneratorConfig' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
        else:
            self._data[name] = value

    def update(self, **overrides) -> "GeneratorConfig":
        """Apply overrides, skipping values that are None."""
        for key, value in overrides.items():
            if value is not None:
                self._data[key] = value
        return self

    def validate(self) -> None:
        if self.max_depth < 1:
            raise ConfigError(f"max_depth must be at least 1, got {self.max_depth}")
        for key in ("valid_count", "invalid_count", "extreme_per_kind"):
            if self._data[key] < 0:
                raise ConfigError(f"{key} must not be negative, got {self._data[key]}")
        if not self.identifier:
            raise ConfigError("identifier must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    @classmethod
    def load(cls, app_dir: Optional[str] = None) -> "GeneratorConfig":
        app_dir = _ensure_app_dir(app_dir)
        config_path = os.path.join(app_dir, "config.json")
        if not os.path.exists(config_path):
            default_cfg = default_config()
            try:
                with open(config_path, "w") as f:
                    json.dump(default_cfg, f, indent=2)
            except OSError as e:
                raise ConfigError(f"Failed to write default config to {config_path}: {e}")
            return cls(app_dir=app_dir, **default_cfg)

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")
        return cls(app_dir=app_dir, **data)

    def save(self) -> str:
        app_dir = _ensure_app_dir(self._app_dir)
        config_path = os.path.join(app_dir, "config.json")
        try:
            with open(config_path, "w") as f:
                json.dump(self._data, f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save config: {e}")
        return config_path


def _ensure_app_dir(app_dir: Optional[str] = None) -> str:
    """Ensure that the ~/.cfgcases/ directory (or app_dir) exists. Return its path."""
    if app_dir is None:
        app_dir = os.path.join(os.path.expanduser("~"), APP_DIR_NAME)
    app_dir = os.path.expanduser(app_dir)
    os.makedirs(app_dir, exist_ok=True)
    return app_dir
