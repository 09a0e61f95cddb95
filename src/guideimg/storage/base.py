"""Storage gateway interface for published guide images."""

from abc import ABC, abstractmethod
from typing import Optional


class ImageStorage(ABC):
    """Binary object store that can publish objects at a public URL."""

    @abstractmethod
    def delete_by_prefix(self, prefix: str) -> int:
        """Delete every object whose path starts with ``prefix``.

        Returns:
            Number of objects deleted.
        """

    @abstractmethod
    def save(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Store ``data`` at ``path``, replacing any existing object."""

    @abstractmethod
    def make_public(self, path: str) -> str:
        """Make the object at ``path`` publicly readable and return its URL."""
