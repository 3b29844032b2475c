"""
Configuration defaults for the dataset processor.

Values come from DATASET_* environment variables, optionally loaded from
a .env file in the working directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .classifier import SupportedDimension
from .exceptions import ConfigurationError
from .utils import SIDECAR_EXTENSIONS

ENV_PREFIX = "DATASET_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    """Default folders and options used when the CLI does not override them."""
    selected_folder: Path = Path("selected_images_output")
    discarded_folder: Path = Path("discarded_images_output")
    backup_folder: Path = Path("images_backup")
    log_folder: Path = Path("logs")
    dimension: SupportedDimension = SupportedDimension.RESOLUTION_512
    exact_match: bool = False
    sidecar_extension: str = ".txt"


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def load_settings(environ=None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (used by tests).

    Raises:
        ConfigurationError: If a value cannot be parsed.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ
    env = environ
    settings = Settings()

    for field_name in ("selected_folder", "discarded_folder", "backup_folder", "log_folder"):
        value = env.get(ENV_PREFIX + field_name.upper())
        if value:
            setattr(settings, field_name, Path(value))

    dimension = env.get(ENV_PREFIX + "DIMENSION")
    if dimension:
        try:
            settings.dimension = SupportedDimension.from_value(dimension)
        except (ValueError, KeyError) as e:
            allowed = ", ".join(str(d.value) for d in SupportedDimension)
            raise ConfigurationError(f"{ENV_PREFIX}DIMENSION must be one of {allowed}, got {dimension!r}") from e

    exact = env.get(ENV_PREFIX + "EXACT_MATCH")
    if exact is not None:
        settings.exact_match = _parse_bool(ENV_PREFIX + "EXACT_MATCH", exact)

    sidecar = env.get(ENV_PREFIX + "SIDECAR_EXTENSION")
    if sidecar:
        if sidecar not in SIDECAR_EXTENSIONS:
            raise ConfigurationError(f"{ENV_PREFIX}SIDECAR_EXTENSION must be .txt or .caption, got {sidecar!r}")
        settings.sidecar_extension = sidecar

    return settings
