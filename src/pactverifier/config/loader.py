"""
Configuration file loading and merging.

Search order:
1. Explicit path (--config flag)
2. .pactverifier.yaml (current directory)
3. Environment / .env settings only
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from pactverifier.config.settings import Settings
from pactverifier.config.verifier import PactVerifierConfig
from pactverifier.core.errors import ConfigurationError

logger = structlog.get_logger()

PROJECT_CONFIG_NAME = ".pactverifier.yaml"


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the configuration file to use.

    An explicit path must exist; the project file is optional.
    """
    if explicit_path:
        path = Path(explicit_path)
        if not path.exists():
            raise ConfigurationError("Config file not found", {"path": str(path)})
        return path

    cwd_config = Path.cwd() / PROJECT_CONFIG_NAME
    if cwd_config.exists():
        return cwd_config

    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError("Config file is not valid YAML", {"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a mapping", {"path": str(path)})

    # YAML reads bare versions such as 1.0 as numbers
    if data.get("provider_version") is not None:
        data["provider_version"] = str(data["provider_version"])
    return data


def load_config(
    path: str | Path | None = None,
    settings: Settings | None = None,
) -> PactVerifierConfig:
    """
    Load verifier configuration.

    Args:
        path: Optional explicit config file path
        settings: Settings to start from (defaults to environment settings)

    Returns:
        PactVerifierConfig instance
    """
    config = PactVerifierConfig.from_settings(settings)
    config_path = get_config_path(path)
    if config_path is None:
        return config

    logger.debug("loaded_config", path=str(config_path))
    return config.merged(_read_yaml(config_path))
