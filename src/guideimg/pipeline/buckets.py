"""Section bucket table shared by the assignment strategies."""

import logging
from typing import Callable, Iterator

from guideimg.models import ExtractedImage, SectionImageMapping
from guideimg.text import normalise_text

logger = logging.getLogger(__name__)


def literal_key(title: str) -> str:
    return title


class SectionBucketTable:
    """One image bucket per section title, addressed through a key function.

    The heading-based assigner keys buckets by normalised title; the page-text
    assigner keys them by the literal title. Either way the table keeps one
    row per input title, in input order, so ``to_list()`` always has the same
    length and order as the titles it was built from.

    Collision policy: when two titles produce the same key the later title
    owns the key (last write wins). The earlier title keeps its row but can
    no longer receive images. Collisions are recorded in ``collisions``.
    """

    def __init__(
        self,
        titles: list[str],
        key: Callable[[str], str] = normalise_text,
    ):
        self.key = key
        self.collisions: list[str] = []
        self._rows: list[SectionImageMapping] = []
        self._by_key: dict[str, SectionImageMapping] = {}

        for title in titles:
            row = SectionImageMapping(
                section_title=title,
                normalised_title=normalise_text(title),
            )
            self._rows.append(row)

            bucket_key = key(title)
            previous = self._by_key.get(bucket_key)
            if previous is not None:
                logger.warning(
                    "Section titles %r and %r share key %r; images go to %r",
                    previous.section_title,
                    title,
                    bucket_key,
                    title,
                )
                self.collisions.append(bucket_key)
            self._by_key[bucket_key] = row

    @classmethod
    def literal(cls, titles: list[str]) -> "SectionBucketTable":
        """Table keyed by the exact title string."""
        return cls(titles, key=literal_key)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, bucket_key: str) -> bool:
        return bucket_key in self._by_key

    def items(self) -> Iterator[tuple[str, SectionImageMapping]]:
        """Live keys and their buckets, in order of first appearance."""
        return iter(self._by_key.items())

    def add(self, bucket_key: str, image: ExtractedImage) -> bool:
        """Append an image to the bucket for a key.

        Returns:
            False if no bucket has that key.
        """
        bucket = self._by_key.get(bucket_key)
        if bucket is None:
            return False
        bucket.images.append(image)
        return True

    def to_list(self) -> list[SectionImageMapping]:
        return list(self._rows)
