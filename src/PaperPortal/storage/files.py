"""Object storage for uploaded paper files."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Sequence

from PaperPortal.core.errors import AuthenticationRequired, UploadError
from PaperPortal.core.models import UploadFile
from PaperPortal.utils.log import log


class FileStore:
    """Directory-backed object store with public URLs.

    Objects live at ``{root}/{identity}/{uuid}.{ext}`` and are served under
    ``{public_base_url}/{identity}/{uuid}.{ext}``.
    """

    def __init__(
        self,
        root: Path,
        public_base_url: str,
        *,
        max_bytes: int,
        allowed_content_types: Sequence[str] = ("application/pdf",),
    ) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes
        self.allowed_content_types = tuple(allowed_content_types)

    def save(self, identity: str | None, file: UploadFile) -> str:
        """Store ``file`` in the caller's namespace and return its public URL.

        Raises:
            AuthenticationRequired: If ``identity`` is missing.
            UploadError: If the file type or size is not allowed, or the
                write fails.
        """
        if not identity:
            raise AuthenticationRequired("User must be authenticated to upload files")
        self.validate(file)

        key = f"{identity}/{uuid.uuid4().hex}"
        if file.extension:
            key = f"{key}.{file.extension}"
        target = self.root / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file.content)
        except OSError as error:
            raise UploadError(str(error)) from error

        log.debug("Stored %d bytes at %s", file.size, target)
        return f"{self.public_base_url}/{key}"

    def delete(self, url: str) -> None:
        """Remove the object behind a URL returned by ``save``.

        Deleting an object that is already gone is not an error.

        Raises:
            UploadError: If the URL is not served by this store or the
                removal fails.
        """
        prefix = f"{self.public_base_url}/"
        if not url.startswith(prefix):
            raise UploadError(f"{url} is not a stored file")
        root = self.root.resolve()
        target = (root / url[len(prefix):]).resolve()
        if target == root or not target.is_relative_to(root):
            raise UploadError(f"{url} is not a stored file")
        try:
            target.unlink(missing_ok=True)
        except OSError as error:
            raise UploadError(str(error)) from error
        log.debug("Deleted %s", target)

    def validate(self, file: UploadFile) -> None:
        """Check content type and size against the upload policy.

        Raises:
            UploadError: If the file violates the policy.
        """
        if file.content_type not in self.allowed_content_types:
            raise UploadError(f"Invalid file type {file.content_type!r}. Please upload a PDF file.")
        if file.size > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise UploadError(f"File too large. Please upload a file smaller than {limit_mb:g}MB.")
