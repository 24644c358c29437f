"""
Settings for the ceprace service.

Values come from, in increasing order of precedence:
    - field defaults below
    - a YAML file (``ceprace.yaml`` in the working directory, or the path in
      ``CEPRACE_CONFIG``)
    - ``CEPRACE_<FIELD>`` environment variables, e.g. ``CEPRACE_TIMEOUT=0.5``
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from ceprace.client.cep_clients import BRASILAPI_URL, VIACEP_URL
from ceprace.exceptions import ConfigError

_logger = logging.getLogger(__name__)

ENV_PREFIX = "CEPRACE_"
DEFAULT_CONFIG_PATH = Path("ceprace.yaml")


class Telemetry(str, Enum):
    """Telemetry backend options."""
    OTEL = "otel"
    NONE = "none"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)

    timeout: float = Field(1.0, gt=0, description="Deadline for one lookup race, in seconds")
    skip_failures: bool = Field(False, description="Failed lookups drop out of the race instead of winning")

    viacep_url: str = VIACEP_URL
    brasilapi_url: str = BRASILAPI_URL
    request_timeout: Optional[float] = Field(10.0, gt=0, description="Upper bound for a single upstream call")

    telemetry: Telemetry = Telemetry.NONE
    otel_endpoint: str = "http://localhost:4318/v1/metrics"
    service_name: str = "ceprace"

    log_level: str = "INFO"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _read_env(environ: Mapping[str, str]) -> dict[str, str]:
    values = {}
    for field in Settings.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{field.upper()}")
        if raw is not None and raw != "":
            values[field] = raw
    return values


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from the config file and the environment.

    An explicitly given ``config_path`` must exist; the default one is optional.
    Raises pydantic's ValidationError when a value is out of range.
    """
    environ = os.environ if environ is None else environ

    if config_path is None and environ.get(f"{ENV_PREFIX}CONFIG"):
        config_path = Path(environ[f"{ENV_PREFIX}CONFIG"])

    values: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file {config_path} does not exist")
        values.update(_read_yaml(config_path))
    elif DEFAULT_CONFIG_PATH.exists():
        values.update(_read_yaml(DEFAULT_CONFIG_PATH))

    values.update(_read_env(environ))

    settings = Settings(**values)
    _logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings
