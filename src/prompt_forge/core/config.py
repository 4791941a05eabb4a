# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Centralized configuration loader for prompt_forge.

Configuration is resolved in this order (later overrides earlier):
1. System defaults (core/constants.py)
2. Explicit keyword overrides passed to ConfigLoader.load()
3. Environment variables (ALWAYS win)
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional

from .constants import (
    DEFAULT_COOLDOWN_BASE,
    DEFAULT_COOLDOWN_CAP,
    DEFAULT_INTER_ROUND_DELAY,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MIN_REQUEST_INTERVAL,
    DEFAULT_MODEL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMPERATURE,
    ENV_API_KEY,
    ENV_API_KEYS,
    ENV_PREFIX,
    GEMINI_API_BASE_URL,
)

lib_logger = logging.getLogger("prompt_forge")


# =============================================================================
# ENVIRONMENT HELPERS
# =============================================================================


def load_credentials_from_env(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Collect Gemini API keys from the environment.

    Supported forms, in this order:
    - GEMINI_API_KEY=key
    - GEMINI_API_KEYS=key1,key2
    - GEMINI_API_KEY_1=key, GEMINI_API_KEY_2=key, ... (numeric order)

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Keys in configured order with duplicates removed
    """
    env = os.environ if environ is None else environ
    keys: List[str] = []

    single = env.get(ENV_API_KEY, "").strip()
    if single:
        keys.append(single)

    for part in env.get(ENV_API_KEYS, "").split(","):
        if part.strip():
            keys.append(part.strip())

    numbered = []
    prefix = f"{ENV_API_KEY}_"
    for env_key, env_val in env.items():
        if not env_key.startswith(prefix):
            continue
        suffix = env_key[len(prefix) :]
        if suffix.isdigit() and env_val.strip():
            numbered.append((int(suffix), env_val.strip()))
    keys.extend(val for _, val in sorted(numbered))

    return list(dict.fromkeys(keys))


# =============================================================================
# PIPELINE CONFIG
# =============================================================================


@dataclass
class PipelineConfig:
    """
    Complete runtime configuration for one GenerationPipeline.
    """

    model: str = DEFAULT_MODEL
    base_url: str = GEMINI_API_BASE_URL
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    cooldown_base: float = DEFAULT_COOLDOWN_BASE
    cooldown_cap: float = DEFAULT_COOLDOWN_CAP
    min_request_interval: float = DEFAULT_MIN_REQUEST_INTERVAL
    inter_round_delay: float = DEFAULT_INTER_ROUND_DELAY

    log_transactions: bool = False
    log_dir: str = "logs"


# env suffix -> (field name, parser)
_ENV_FIELDS = {
    "MODEL": ("model", str),
    "BASE_URL": ("base_url", str),
    "TEMPERATURE": ("temperature", float),
    "MAX_OUTPUT_TOKENS": ("max_output_tokens", int),
    "REQUEST_TIMEOUT": ("request_timeout", float),
    "COOLDOWN_BASE": ("cooldown_base", float),
    "COOLDOWN_CAP": ("cooldown_cap", float),
    "MIN_REQUEST_INTERVAL": ("min_request_interval", float),
    "INTER_ROUND_DELAY": ("inter_round_delay", float),
    "LOG_DIR": ("log_dir", str),
}


class ConfigLoader:
    """
    Builds PipelineConfig instances.

    Usage:
        config = ConfigLoader().load(model="gemini-2.5-flash")
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the ConfigLoader.

        Args:
            environ: Mapping to read overrides from. Defaults to os.environ.
        """
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def load(self, **overrides: Any) -> PipelineConfig:
        """
        Load a complete configuration.

        Args:
            **overrides: Field values applied on top of the defaults;
                None values are ignored

        Returns:
            PipelineConfig with environment overrides applied
        """
        known = {f.name for f in fields(PipelineConfig)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown config field(s): {', '.join(sorted(unknown))}")

        config = PipelineConfig(**{k: v for k, v in overrides.items() if v is not None})
        self._apply_env_overrides(config)
        self._validate(config)
        return config

    # =========================================================================
    # INTERNAL METHODS
    # =========================================================================

    def _apply_env_overrides(self, config: PipelineConfig) -> None:
        """
        Apply PROMPT_FORGE_* environment variables.

        Invalid values are logged and the current value is kept.
        """
        env = self.environ
        for suffix, (name, parser) in _ENV_FIELDS.items():
            env_key = f"{ENV_PREFIX}{suffix}"
            env_val = env.get(env_key)
            if env_val is None or not env_val.strip():
                continue
            try:
                setattr(config, name, parser(env_val.strip()))
            except ValueError:
                lib_logger.warning(
                    f"Invalid {env_key}='{env_val}'. Keeping {getattr(config, name)!r}."
                )

        env_key = f"{ENV_PREFIX}LOG_TRANSACTIONS"
        env_val = env.get(env_key)
        if env_val is not None:
            config.log_transactions = env_val.lower() in ("true", "1", "yes")

    def _validate(self, config: PipelineConfig) -> None:
        """Reset nonsensical values to their defaults."""
        defaults: Dict[str, Any] = {
            "cooldown_base": DEFAULT_COOLDOWN_BASE,
            "cooldown_cap": DEFAULT_COOLDOWN_CAP,
            "min_request_interval": DEFAULT_MIN_REQUEST_INTERVAL,
            "inter_round_delay": DEFAULT_INTER_ROUND_DELAY,
        }
        for name, default in defaults.items():
            if getattr(config, name) < 0:
                lib_logger.warning(f"{name} must be >= 0. Using {default}.")
                setattr(config, name, default)
        if config.cooldown_cap < config.cooldown_base:
            lib_logger.warning(
                f"cooldown_cap ({config.cooldown_cap}) < cooldown_base "
                f"({config.cooldown_base}). Raising cap to base."
            )
            config.cooldown_cap = config.cooldown_base
