"""Manual correction of image assignments by guide editors."""

import logging

from guideimg.models import AreaImageUpdate, Guide

logger = logging.getLogger(__name__)


class InvalidImageUpdate(ValueError):
    """An image update is malformed or refers to an unknown image."""


def guide_image_urls(guide: Guide) -> set[str]:
    """Every image URL currently attached to any area."""
    urls = set()
    for area in guide.areas:
        urls.update(area.images or [])
    return urls


def reassign_area_images(guide: Guide, updates: list[AreaImageUpdate]) -> Guide:
    """Replace the image lists of the areas named in ``updates``.

    Images can be moved between areas, reordered or removed, but never
    introduced: every URL must already be attached somewhere in the guide.
    The guide is modified in place and returned.

    Raises:
        InvalidImageUpdate: If an update has no id or an unknown URL
    """
    known_urls = guide_image_urls(guide)

    for update in updates:
        if not update.id:
            raise InvalidImageUpdate("Each update must have an id")
        for url in update.images:
            if url not in known_urls:
                raise InvalidImageUpdate(f"Image URL not from original guide: {url[:50]}...")

    updates_by_id = {update.id: update.images for update in updates}
    for area in guide.areas:
        if area.id in updates_by_id:
            area.images = list(updates_by_id[area.id])

    logger.info("Reassigned images for %d area(s)", len(updates_by_id))
    return guide
