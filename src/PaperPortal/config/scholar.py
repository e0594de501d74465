"""Google Scholar import configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from PaperPortal.config.common import (
    expect_bool,
    expect_float,
    expect_int,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class ScholarConfig:
    """Store validated citation-provider settings."""

    enabled: bool
    base_url: str
    api_key_env: str
    api_key: str
    max_results: int
    timeout: float


def load_scholar(raw: Mapping[str, Any]) -> ScholarConfig:
    """Load scholar domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "scholar", required=True)
    api_key_env = expect_str(
        get_required_value(section, "api_key_env", "scholar.api_key_env"), "scholar.api_key_env"
    )
    return ScholarConfig(
        enabled=expect_bool(get_required_value(section, "enabled", "scholar.enabled"), "scholar.enabled"),
        base_url=expect_str(
            get_optional_value(section, "base_url", "https://serpapi.com/search.json"), "scholar.base_url"
        ),
        api_key_env=api_key_env,
        api_key=_load_api_key_from_env(api_key_env),
        max_results=expect_int(get_optional_value(section, "max_results", 100), "scholar.max_results"),
        timeout=expect_float(get_optional_value(section, "timeout", 30), "scholar.timeout"),
    )


def check_scholar(config: ScholarConfig) -> None:
    """Validate scholar domain constraints.

    Raises:
        ValueError: If values violate constraints or the API key is missing
            while the import is enabled.
    """
    if not config.api_key_env.strip():
        raise ValueError("scholar.api_key_env must not be empty")
    if config.max_results <= 0:
        raise ValueError("scholar.max_results must be positive")
    if config.timeout <= 0:
        raise ValueError("scholar.timeout must be positive")
    if config.enabled:
        if not config.base_url.strip():
            raise ValueError("scholar.base_url is required when scholar.enabled is true")
        if not config.api_key:
            raise ValueError(
                f"Scholar import enabled but {config.api_key_env} environment variable not set. "
                "Set it in your .env file or shell environment."
            )


def _load_api_key_from_env(api_key_env: str) -> str:
    """Load API key from environment variable."""
    return os.getenv(api_key_env, "").strip()
