"""
File Asset Store.

Uploaded bill attachments (PDF scans, photos of the slip) kept as plain
files in the assets subdirectory of the data root.  Assets are addressed
by filename only; a save with an existing name replaces the content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from billtracker.logger import StructuredLogger
from billtracker.services.base_service import BaseService
from billtracker.utils.ids import generate_id
from billtracker.utils.string_helpers import safe_filename

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

_CONTENT_TYPES: dict[str, str] = {
    "pdf": "application/pdf",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}


class AssetStoreError(Exception):
    """Base class for attachment storage errors."""


class AssetNotFoundError(AssetStoreError):
    """Raised when a filename does not resolve to a stored asset."""


class InvalidAssetNameError(AssetStoreError):
    """Raised when a filename is empty or contains a path component."""


class StoredAsset(BaseModel):
    """An asset read back from disk."""

    filename: str
    content: bytes
    content_type: str


def content_type_for(filename: str) -> str:
    """MIME type derived from the file extension (case-insensitive)."""
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return _CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def build_attachment_name(original_name: str) -> str:
    """Stored name for an upload: ``<generated id>_<sanitized original name>``."""
    return f"{generate_id()}_{safe_filename(original_name)}"


def _is_plain_name(filename: str) -> bool:
    return bool(filename) and filename not in (".", "..") and not any(
        sep in filename for sep in ("/", "\\", "\x00")
    )


class AssetStore(BaseService):
    """Reads and writes attachments under *root*."""

    def __init__(self, root: Path, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def ensure_directory(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    def save(self, filename: str, content: bytes) -> Path:
        """Write *content* as *filename*, replacing any previous asset.

        Raises
        ------
        InvalidAssetNameError
            If *filename* is empty or is not a single path component.
        OSError
            If the file cannot be written.
        """
        if not _is_plain_name(filename):
            raise InvalidAssetNameError(f"Invalid asset filename: {filename!r}")

        self.ensure_directory()
        target = self._root / filename
        target.write_bytes(content)
        self._logger.info("Asset saved: %s (%d bytes)", filename, len(content))
        return target

    def load(self, filename: str) -> StoredAsset:
        """Return the stored asset called *filename*.

        Raises
        ------
        AssetNotFoundError
            If the name does not resolve to a regular file directly inside
            the assets directory.  Traversal attempts land here too.
        """
        path = self._resolve(filename)
        if path is None or not path.is_file():
            self._logger.warning("Asset not found: %s", filename)
            raise AssetNotFoundError(filename)

        try:
            content = path.read_bytes()
        except OSError as exc:
            self._logger.warning("Asset unreadable: %s: %s", filename, exc)
            raise AssetNotFoundError(filename) from exc

        return StoredAsset(
            filename=path.name,
            content=content,
            content_type=content_type_for(path.name),
        )

    def _resolve(self, filename: str) -> Optional[Path]:
        if not _is_plain_name(filename):
            return None
        root = self._root.resolve()
        candidate = (root / filename).resolve()
        # Symlinks pointing outside the directory are rejected as well.
        if candidate.parent != root:
            return None
        return candidate
