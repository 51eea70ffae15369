"""Configuration and secret-map file loading for callers of the core."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml
import jsonschema

from safetylayer.errors import ConfigError, SecretMapError
from safetylayer.models import Intensity, ScrubberOptions, SecretEntry

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "schemas"


@dataclass
class ScrubberConfig:
    """Settings loaded from a YAML configuration file."""

    options: ScrubberOptions = field(default_factory=ScrubberOptions)
    intensity: Intensity = Intensity.STANDARD
    strict: bool = False
    reuse_tokens: bool = False
    smart_copy: bool = False


def load_config(path: Optional[Union[str, Path]] = None) -> ScrubberConfig:
    """
    Load scrubber settings from a YAML file.

    Args:
        path: Configuration file. If None, returns the defaults.

    Returns:
        ScrubberConfig with any missing keys left at their defaults

    Raises:
        ConfigError: If the file is missing, unparsable, or fails validation
    """
    if path is None:
        return ScrubberConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    logger.info(f"Loading configuration from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    _validate_schema(data, "config-schema.json")

    return ScrubberConfig(
        options=ScrubberOptions.from_dict(data.get("options", {})),
        intensity=Intensity(data.get("intensity", Intensity.STANDARD.value)),
        strict=data.get("strict", False),
        reuse_tokens=data.get("reuse_tokens", False),
        smart_copy=data.get("smart_copy", False),
    )


def load_secret_map(path: Union[str, Path]) -> list[SecretEntry]:
    """
    Read a secret map written by ``save_secret_map``.

    Raises:
        SecretMapError: If the file is missing, not valid JSON, or fails validation
    """
    path = Path(path)
    if not path.is_file():
        raise SecretMapError(f"Secret map not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SecretMapError(f"Secret map {path} is not valid JSON: {e}") from e

    try:
        _validate_schema(data, "secret-map-schema.json")
    except ConfigError as e:
        raise SecretMapError(str(e)) from e

    entries = [SecretEntry.from_dict(item) for item in data]
    logger.debug(f"Loaded {len(entries)} secret entries from {path}")
    return entries


def save_secret_map(path: Union[str, Path], secret_map: list[SecretEntry]) -> None:
    """Write a secret map as a JSON array."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([entry.to_dict() for entry in secret_map], f, indent=2)
    logger.debug(f"Wrote {len(secret_map)} secret entries to {path}")


def _validate_schema(data: Any, schema_name: str) -> None:
    """Validate data against a packaged JSON schema."""
    schema_path = SCHEMA_DIR / schema_name

    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Schema validation failed: {e.message}") from e
