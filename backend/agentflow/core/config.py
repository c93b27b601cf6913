# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
AgentFlow Configuration - Single source of truth.
YAML is king. Env vars ONLY for deployment-specific overrides.

- ALL configuration in plain text (YAML)
- NO hidden state - everything inspectable via `cat`, `grep`
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from agentflow.core.errors import ConfigurationError


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable application configuration.
    All values from YAML. No hidden state.
    """

    # -- Runtime budgets --
    max_execution_time_ms: int = 5 * 60 * 1000
    max_steps: int = 100
    debug: bool = False
    cost_per_1k_tokens: float = 0.002
    max_inline_delay_ms: int = 30 * 1000

    # -- Webhooks --
    app_url: str = "http://localhost:3000"
    webhook_path: str = "/api/webhooks/agents"
    signature_header: str = "X-Webhook-Signature"

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def webhook_base_url(self) -> str:
        return f"{self.app_url.rstrip('/')}{self.webhook_path}"


# =============================================================================
# LOADER
# =============================================================================

# (yaml section, yaml key) -> (Config field, type)
YAML_FIELDS = {
    ("runtime", "max_execution_time_ms"): ("max_execution_time_ms", int),
    ("runtime", "max_steps"): ("max_steps", int),
    ("runtime", "debug"): ("debug", bool),
    ("runtime", "cost_per_1k_tokens"): ("cost_per_1k_tokens", float),
    ("runtime", "max_inline_delay_ms"): ("max_inline_delay_ms", int),
    ("webhooks", "app_url"): ("app_url", str),
    ("webhooks", "path"): ("webhook_path", str),
    ("webhooks", "signature_header"): ("signature_header", str),
    ("logging", "level"): ("log_level", str),
    ("logging", "format"): ("log_format", str),
}

# Deployment-specific overrides; win over YAML
ENV_OVERRIDES = {
    "APP_URL": "app_url",
    "LOG_LEVEL": "log_level",
}


def _read_yaml(path: str) -> dict:
    if not Path(path).exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config: {e}", config_file=path)

    if not isinstance(data, dict):
        raise ConfigurationError("Config root must be a mapping", config_file=path)
    return data


def load_config(path: str = "configs/agentflow.yaml") -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist; unknown keys are ignored.
    """
    data = _read_yaml(path)
    values = {}

    for (section, key), (field_name, cast) in YAML_FIELDS.items():
        block = data.get(section) or {}
        if not isinstance(block, dict):
            raise ConfigurationError(f"Config section '{section}' must be a mapping", config_file=path)
        if block.get(key) is None:
            continue
        try:
            values[field_name] = cast(block[key])
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Invalid value for {section}.{key}: {block[key]!r}", config_file=path
            )

    for env_var, field_name in ENV_OVERRIDES.items():
        if os.getenv(env_var):
            values[field_name] = os.environ[env_var]

    return Config(**values)


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("AGENTFLOW_CONFIG_PATH", "configs/agentflow.yaml")
        _config = load_config(config_path)
    return _config


def reload_config() -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
