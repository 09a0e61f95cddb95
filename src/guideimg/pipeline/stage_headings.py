"""Heading Detection Stage - Font-size based heading finder.

Fallback path for image assignment, used when the PDF backend supplies
font-annotated text blocks but no page text:
1. Compute the median font size of all blocks
2. Blocks noticeably larger than the median are heading candidates
3. Reject candidates that are too short, too long or read like sentences

Images are then paired with headings by page and ordinal position.
"""

import logging
import statistics
from dataclasses import dataclass
from typing import Optional

from guideimg.models import (
    DetectedHeading,
    ExtractedImage,
    SectionImageMapping,
    TextBlock,
)
from guideimg.text import normalise_text

from .buckets import SectionBucketTable

logger = logging.getLogger(__name__)


# Headings must be at least 20% larger than the median (body) font size
DEFAULT_FONT_SIZE_RATIO = 1.2
DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 100

# Median used when there are no blocks at all
DEFAULT_BODY_FONT_SIZE = 12.0

# A block ending with a period and with more words than this is body text
SENTENCE_MAX_HEADING_WORDS = 10


@dataclass
class HeadingDetectorConfig:
    """Configuration for heading detection."""

    font_size_ratio: float = DEFAULT_FONT_SIZE_RATIO
    min_length: int = DEFAULT_MIN_LENGTH
    max_length: int = DEFAULT_MAX_LENGTH


def median_font_size(blocks: list[TextBlock]) -> float:
    """Median font size of the blocks (12 when there are none)."""
    if not blocks:
        return DEFAULT_BODY_FONT_SIZE
    return statistics.median(block.font_size for block in blocks)


def _looks_like_sentence(text: str) -> bool:
    return text.endswith(".") and len(text.split()) > SENTENCE_MAX_HEADING_WORDS


class HeadingDetector:
    """Finds headings among text blocks using font-size statistics."""

    def __init__(self, config: Optional[HeadingDetectorConfig] = None):
        self.config = config or HeadingDetectorConfig()

    def detect(self, blocks: list[TextBlock]) -> list[DetectedHeading]:
        """Detect headings.

        Args:
            blocks: Font-annotated text blocks from any number of pages.

        Returns:
            Headings sorted by page, then top of page first.
        """
        threshold = median_font_size(blocks) * self.config.font_size_ratio

        headings = []
        for block in blocks:
            text = block.text.strip()

            if len(text) < self.config.min_length or len(text) > self.config.max_length:
                continue
            if block.font_size < threshold:
                continue
            if _looks_like_sentence(text):
                continue

            headings.append(
                DetectedHeading(
                    text=text,
                    page=block.page,
                    y=block.y,
                    font_size=block.font_size,
                    normalised_text=normalise_text(text),
                )
            )

        # PDF y grows upward, so higher y comes first on the page
        headings.sort(key=lambda h: (h.page, -h.y))
        return headings


def detect_headings(
    blocks: list[TextBlock],
    config: Optional[HeadingDetectorConfig] = None,
) -> list[DetectedHeading]:
    """Detect headings with the given (or default) configuration."""
    return HeadingDetector(config).detect(blocks)


def find_heading_for_image(
    image: ExtractedImage,
    headings: list[DetectedHeading],
) -> Optional[DetectedHeading]:
    """Pick the heading an image belongs to.

    On a page with headings the pairing is ordinal: the first image goes to
    the first heading, and surplus images collapse onto the page's last
    heading. On a page without headings the image goes to the last heading
    of the closest earlier page.

    Args:
        image: Image to place.
        headings: Headings sorted as returned by ``detect_headings``.

    Returns:
        The heading, or None if no heading precedes the image.
    """
    page_headings = [h for h in headings if h.page == image.page]

    if not page_headings:
        earlier = [h for h in headings if h.page < image.page]
        if not earlier:
            return None
        closest_page = max(h.page for h in earlier)
        return [h for h in earlier if h.page == closest_page][-1]

    return page_headings[min(image.index, len(page_headings) - 1)]


def map_images_to_sections(
    images: list[ExtractedImage],
    headings: list[DetectedHeading],
    section_titles: list[str],
) -> list[SectionImageMapping]:
    """Assign images to sections through detected headings.

    Each image is resolved to a heading, and the heading to a section by
    exact normalised match or, failing that, by the first section whose
    normalised title contains or is contained by the heading. Images that
    resolve to nothing are dropped.

    Args:
        images: Extracted images.
        headings: Detected headings.
        section_titles: Area names from the guide.

    Returns:
        One mapping per section title, in title order.
    """
    table = SectionBucketTable(section_titles)

    for image in images:
        heading = find_heading_for_image(image, headings)

        if heading is None:
            logger.warning("No heading found for image on page %d, index %d", image.page, image.index)
            continue

        normalised = heading.normalised_text
        if table.add(normalised, image):
            continue

        matched = False
        if normalised:
            for key, bucket in table.items():
                if key and (normalised in key or key in normalised):
                    bucket.images.append(image)
                    matched = True
                    break

        if not matched:
            logger.warning(
                "Could not match heading %r to any section. Available: %s",
                heading.text,
                ", ".join(section_titles),
            )

    return table.to_list()
