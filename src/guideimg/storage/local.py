"""Filesystem implementation of the image storage gateway.

Used for dry runs from the command line; objects are plain files under a
root directory.
"""

from pathlib import Path
from typing import Optional

from .base import ImageStorage


class LocalImageStorage(ImageStorage):
    """Stores images as files below ``root``."""

    def __init__(self, root: Path, base_url: Optional[str] = None):
        """Initialize the gateway.

        Args:
            root: Directory that plays the role of the bucket
            base_url: URL prefix for public URLs (default: file:// URIs)
        """
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else None

    def _file(self, path: str) -> Path:
        return self.root / path

    def delete_by_prefix(self, prefix: str) -> int:
        deleted = 0
        if not self.root.exists():
            return deleted
        for file in sorted(self.root.rglob("*")):
            if not file.is_file():
                continue
            if file.relative_to(self.root).as_posix().startswith(prefix):
                file.unlink()
                deleted += 1
        return deleted

    def save(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        file = self._file(path)
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_bytes(data)

    def make_public(self, path: str) -> str:
        file = self._file(path)
        if not file.exists():
            raise FileNotFoundError(f"No stored object at {path}")
        if self.base_url:
            return f"{self.base_url}/{path}"
        return file.as_uri()
