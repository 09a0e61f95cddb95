"""Upload extracted images and build their public URLs.

Storage layout: ``venues/{venue_id}/images/{section}-{index}.png``.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from guideimg.config import settings
from guideimg.models import BatchUploadResult, ExtractedImage, UploadedImage

from .base import ImageStorage

logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPE = "image/png"

_UNSAFE_RUN = re.compile(r"[^a-z0-9]+")


def sanitise_section_id(section_id: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to one hyphen, trim hyphens."""
    return _UNSAFE_RUN.sub("-", section_id.lower()).strip("-")


def generate_filename(section_id: str, index: int) -> str:
    """URL-safe filename, e.g. ``entry-hall-0.png``."""
    return f"{sanitise_section_id(section_id)}-{index}.png"


def venue_image_prefix(venue_id: str) -> str:
    return f"venues/{venue_id}/images/"


def image_storage_path(venue_id: str, section_id: str, index: int) -> str:
    return venue_image_prefix(venue_id) + generate_filename(section_id, index)


def upload_image(
    storage: ImageStorage,
    venue_id: str,
    section_id: str,
    index: int,
    image: ExtractedImage,
    cache_control: Optional[str] = None,
) -> UploadedImage:
    """Save one image and make it public."""
    storage_path = image_storage_path(venue_id, section_id, index)

    storage.save(
        storage_path,
        image.data,
        content_type=IMAGE_CONTENT_TYPE,
        cache_control=cache_control or settings.image_cache_control,
        metadata={
            "sectionId": section_id,
            "width": str(image.width),
            "height": str(image.height),
        },
    )
    public_url = storage.make_public(storage_path)

    return UploadedImage(
        storage_path=storage_path,
        public_url=public_url,
        width=image.width,
        height=image.height,
    )


def upload_section_images(
    storage: ImageStorage,
    venue_id: str,
    section_id: str,
    images: list[ExtractedImage],
) -> list[UploadedImage]:
    """Upload a section's images, returning them in the same order."""
    return [
        upload_image(storage, venue_id, section_id, index, image)
        for index, image in enumerate(images)
    ]


def delete_venue_images(storage: ImageStorage, venue_id: str) -> int:
    """Delete every stored image of a venue (cleanup before re-upload)."""
    prefix = venue_image_prefix(venue_id)
    deleted = storage.delete_by_prefix(prefix)
    logger.info("Deleted %d existing image(s) at %s", deleted, prefix)
    return deleted


def upload_batch_images(
    storage: ImageStorage,
    venue_id: str,
    section_image_map: dict[str, list[ExtractedImage]],
    batch_size: int = None,
) -> BatchUploadResult:
    """Upload images for several sections.

    Sections are uploaded concurrently in sequential batches of
    ``batch_size``. The first failing upload propagates.

    Args:
        storage: Storage gateway
        venue_id: Venue owning the images
        section_image_map: Section id to its images, in display order
        batch_size: Concurrent sections per batch (default from settings)

    Returns:
        BatchUploadResult keyed by section id
    """
    batch_size = batch_size or settings.upload_batch_size
    result = BatchUploadResult()
    entries = list(section_image_map.items())

    with ThreadPoolExecutor(max_workers=batch_size) as executor:
        for start in range(0, len(entries), batch_size):
            batch = entries[start:start + batch_size]
            futures = [
                executor.submit(upload_section_images, storage, venue_id, section_id, images)
                for section_id, images in batch
            ]

            for (section_id, images), future in zip(batch, futures):
                uploaded = future.result()
                if not images:
                    result.sections_without_images.append(section_id)
                result.section_images[section_id] = uploaded
                result.total_uploaded += len(uploaded)

    logger.info(
        "Uploaded %d image(s) for %d section(s)",
        result.total_uploaded,
        len(result.section_images),
    )
    return result
