"""Shared helpers for reading and type-checking config sections.

Every error message names the dotted config key (``storage.db_path``) so a
bad YAML value can be found without a traceback.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return the top-level section ``key``.

    Optional sections that are absent come back as an empty mapping.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {key}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{key} must be an object")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def get_optional_value(section: Mapping[str, Any], field: str, default: Any) -> Any:
    return section.get(field, default)


def _check_type(value: Any, types: type | tuple[type, ...], config_key: str, label: str) -> Any:
    # bool is an int subclass; only accept it where bool is asked for.
    if isinstance(value, bool) and types is not bool:
        raise TypeError(f"{config_key} must be {label}")
    if not isinstance(value, types):
        raise TypeError(f"{config_key} must be {label}")
    return value


def expect_str(value: Any, config_key: str) -> str:
    return _check_type(value, str, config_key, "a string")


def expect_bool(value: Any, config_key: str) -> bool:
    return _check_type(value, bool, config_key, "a boolean")


def expect_int(value: Any, config_key: str) -> int:
    return _check_type(value, int, config_key, "an integer")


def expect_float(value: Any, config_key: str) -> float:
    """Accept any non-bool number and return it as float."""
    return float(_check_type(value, (int, float), config_key, "a number"))


def expect_str_list(value: Any, config_key: str) -> list[str]:
    """Validate a list of strings, reporting the first bad index."""
    _check_type(value, list, config_key, "a list")
    for idx, item in enumerate(value):
        _check_type(item, str, f"{config_key}[{idx}]", "a string")
    return list(value)


def expect_choice(value: str, choices: Iterable[str], config_key: str) -> str:
    allowed = tuple(choices)
    if value not in allowed:
        raise ValueError(f"{config_key} must be one of {list(allowed)}")
    return value
