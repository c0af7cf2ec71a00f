"""
Configuration management for the asset validator.
Supports TOML and JSON configuration files with environment variable overrides.
"""

import os
import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Optional, Any, Union

# Handle tomllib import for different Python versions
try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11 with tomli package


ENV_PREFIX = "ASSET_VALIDATOR_"

DEFAULT_CONFIG_FILES = [
    Path("asset_validator.toml"),
    Path("asset_validator.json"),
    Path("config/asset_validator.toml"),
]

DEFAULT_VALIDATIONS_FILES = [
    Path("config/asset_validations.toml"),
    Path("config/asset_validations.json"),
]


class ConfigurationError(Exception):
    """Raised for unreadable or malformed configuration and validation files."""


def load_data(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a TOML or JSON file into a dictionary.

    Raises:
        ConfigurationError: If the file is missing, unsupported or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(f"Unsupported configuration format: {path.suffix}")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a table/object at the top level")
    return data


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ValidatorConfig:
    """Main configuration class for the asset validator."""

    # Paths
    project_root: str = "."
    validations_file: Optional[str] = None
    report_file: str = "asset_validation.html"
    template_dir: Optional[str] = None

    # Run settings
    output_format: str = "simple"
    probe: str = "pillow"
    show_progress: bool = True
    log_level: str = "WARNING"

    @property
    def root_path(self) -> Path:
        return Path(self.project_root)

    @property
    def report_path(self) -> Path:
        """Report file location, relative paths are taken from the project root."""
        path = Path(self.report_file)
        return path if path.is_absolute() else self.root_path / path

    def find_validations_file(self) -> Optional[Path]:
        """Return the validations file to use, or None if no file exists."""
        if self.validations_file:
            path = Path(self.validations_file)
            if not path.is_absolute():
                path = self.root_path / path
            if not path.exists():
                raise ConfigurationError(f"Validations file not found: {path}")
            return path

        for candidate in DEFAULT_VALIDATIONS_FILES:
            path = self.root_path / candidate
            if path.is_file():
                return path
        return None

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ValidatorConfig":
        """Load configuration from TOML or JSON file."""
        return cls._from_dict(load_data(config_path))

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "ValidatorConfig":
        """Create configuration from dictionary."""
        config_data = {}

        # Handle paths
        if "paths" in data:
            paths = data["paths"]
            config_data["project_root"] = paths.get("project_root", ".")
            config_data["validations_file"] = paths.get("validations_file")
            config_data["report_file"] = paths.get("report_file", "asset_validation.html")
            config_data["template_dir"] = paths.get("template_dir")

        # Handle run settings
        if "run" in data:
            run = data["run"]
            config_data["output_format"] = run.get("format", "simple")
            config_data["probe"] = run.get("probe", "pillow")
            config_data["show_progress"] = bool(run.get("show_progress", True))
            config_data["log_level"] = run.get("log_level", "WARNING")

        return cls(**config_data)

    @classmethod
    def default(cls) -> "ValidatorConfig":
        """Create default configuration with environment variable overrides."""
        return cls._apply_env_overrides(cls())

    from_env = default

    @classmethod
    def _apply_env_overrides(cls, config: "ValidatorConfig") -> "ValidatorConfig":
        """Apply environment variable overrides to configuration."""

        # Paths
        if os.getenv("ASSET_VALIDATOR_PROJECT_ROOT"):
            config.project_root = os.getenv("ASSET_VALIDATOR_PROJECT_ROOT", ".")

        if os.getenv("ASSET_VALIDATOR_VALIDATIONS_FILE"):
            config.validations_file = os.getenv("ASSET_VALIDATOR_VALIDATIONS_FILE")

        if os.getenv("ASSET_VALIDATOR_REPORT_FILE"):
            config.report_file = os.getenv("ASSET_VALIDATOR_REPORT_FILE", "asset_validation.html")

        if os.getenv("ASSET_VALIDATOR_TEMPLATE_DIR"):
            config.template_dir = os.getenv("ASSET_VALIDATOR_TEMPLATE_DIR")

        # Run settings
        if os.getenv("ASSET_VALIDATOR_FORMAT"):
            config.output_format = os.getenv("ASSET_VALIDATOR_FORMAT", "simple")

        if os.getenv("ASSET_VALIDATOR_PROBE"):
            config.probe = os.getenv("ASSET_VALIDATOR_PROBE", "pillow")

        if os.getenv("ASSET_VALIDATOR_SHOW_PROGRESS"):
            config.show_progress = _env_bool(os.getenv("ASSET_VALIDATOR_SHOW_PROGRESS", "true"))

        if os.getenv("ASSET_VALIDATOR_LOG_LEVEL"):
            config.log_level = os.getenv("ASSET_VALIDATOR_LOG_LEVEL", "WARNING")

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.output_format not in ("simple", "html", "json"):
            errors.append("output_format must be simple, html, or json")

        if self.probe not in ("pillow", "identify"):
            errors.append("probe must be pillow or identify")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append("log_level must be a standard logging level name")

        if not self.root_path.is_dir():
            errors.append(f"project_root is not a directory: {self.project_root}")

        if self.template_dir and not Path(self.template_dir).is_dir():
            errors.append(f"template_dir is not a directory: {self.template_dir}")

        return errors

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


ENV_VARS = [
    ("ASSET_VALIDATOR_PROJECT_ROOT", "Project root for asset and source paths", "."),
    ("ASSET_VALIDATOR_VALIDATIONS_FILE", "Validations file (TOML or JSON)", "config/asset_validations.toml"),
    ("ASSET_VALIDATOR_REPORT_FILE", "HTML report file", "asset_validation.html"),
    ("ASSET_VALIDATOR_TEMPLATE_DIR", "Directory with the HTML report template", "templates"),
    ("ASSET_VALIDATOR_FORMAT", "Output format (simple/html/json)", "simple"),
    ("ASSET_VALIDATOR_PROBE", "Image probe (pillow/identify)", "pillow"),
    ("ASSET_VALIDATOR_SHOW_PROGRESS", "Show progress bars (true/false)", "true"),
    ("ASSET_VALIDATOR_LOG_LEVEL", "Logging level", "INFO"),
]
