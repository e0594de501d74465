"""Authorization domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from PaperPortal.config.common import expect_choice, expect_str, get_optional_value, get_section

_ALLOWED_FALLBACKS = ("teacher", "none")


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Role resolution settings.

    Attributes:
        missing_role_fallback: Role assigned when an identity has no role row
            or the lookup fails.
    """

    missing_role_fallback: str


def load_auth(raw: Mapping[str, Any]) -> AuthConfig:
    """Load auth domain config from raw mapping."""
    section = get_section(raw, "auth", required=False)
    return AuthConfig(
        missing_role_fallback=expect_str(
            get_optional_value(section, "missing_role_fallback", "teacher"),
            "auth.missing_role_fallback",
        ),
    )


def check_auth(config: AuthConfig) -> None:
    """Validate auth domain constraints."""
    expect_choice(config.missing_role_fallback, _ALLOWED_FALLBACKS, "auth.missing_role_fallback")
