"""
pactverifier configuration.

Provides:
- Pydantic-based settings (environment variables, .env files)
- Run-level verifier configuration
- Optional YAML config file overrides
"""

from pactverifier.config.loader import get_config_path, load_config
from pactverifier.config.settings import Settings, get_settings
from pactverifier.config.verifier import PactVerifierConfig, default_report_outputters

__all__ = [
    "Settings",
    "get_settings",
    "PactVerifierConfig",
    "default_report_outputters",
    "load_config",
    "get_config_path",
]
