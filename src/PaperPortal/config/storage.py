"""Storage domain configuration: relational database and file storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from PaperPortal.config.common import (
    expect_int,
    expect_str,
    expect_str_list,
    get_optional_value,
    get_required_value,
    get_section,
)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Storage configuration.

    Attributes:
        db_path: SQLite database file.
        files_dir: Root directory of the object store.
        public_base_url: URL prefix under which stored files are served.
        max_upload_bytes: Upload size ceiling.
        allowed_content_types: MIME types accepted for upload.
        enrich_batch_size: Papers resolved per co-author lookup.
    """

    db_path: str
    files_dir: str
    public_base_url: str
    max_upload_bytes: int
    allowed_content_types: tuple[str, ...]
    enrich_batch_size: int


def load_storage(raw: Mapping[str, Any]) -> StorageConfig:
    """Load storage domain config from raw mapping."""
    section = get_section(raw, "storage", required=True)
    return StorageConfig(
        db_path=expect_str(get_required_value(section, "db_path", "storage.db_path"), "storage.db_path"),
        files_dir=expect_str(get_required_value(section, "files_dir", "storage.files_dir"), "storage.files_dir"),
        public_base_url=expect_str(
            get_required_value(section, "public_base_url", "storage.public_base_url"),
            "storage.public_base_url",
        ),
        max_upload_bytes=expect_int(
            get_optional_value(section, "max_upload_bytes", DEFAULT_MAX_UPLOAD_BYTES),
            "storage.max_upload_bytes",
        ),
        allowed_content_types=tuple(
            expect_str_list(
                get_optional_value(section, "allowed_content_types", ["application/pdf"]),
                "storage.allowed_content_types",
            )
        ),
        enrich_batch_size=expect_int(
            get_optional_value(section, "enrich_batch_size", 20),
            "storage.enrich_batch_size",
        ),
    )


def check_storage(config: StorageConfig) -> None:
    """Validate storage domain constraints."""
    if not config.db_path.strip():
        raise ValueError("storage.db_path must not be empty")
    if not config.files_dir.strip():
        raise ValueError("storage.files_dir must not be empty")
    if config.max_upload_bytes <= 0:
        raise ValueError("storage.max_upload_bytes must be positive")
    if not config.allowed_content_types:
        raise ValueError("storage.allowed_content_types must not be empty")
    if config.enrich_batch_size <= 0:
        raise ValueError("storage.enrich_batch_size must be positive")
