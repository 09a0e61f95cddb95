"""PDF Image Pipeline - Extraction through to image URLs on the guide.

Flow:
1. Extract page text, text blocks and images from the PDF
2. Assign images to guide sections (page text, else detected headings)
3. Delete the venue's previously stored images and upload the new ones
4. Attach public URLs to the matching guide areas

Only unreadable PDF text is fatal for extraction, and even that is caught
here: every failure degrades to fewer (or no) images on the guide.
"""

import logging
from typing import Optional

from guideimg.config import settings
from guideimg.models import (
    ExtractedImage,
    Guide,
    ImagePipelineResult,
    MappingStrategy,
    PdfContent,
    SectionImageMapping,
    UploadedImage,
)
from guideimg.storage import ImageStorage, delete_venue_images, upload_batch_images

from .buckets import SectionBucketTable
from .stage_assign import map_images_by_page_text, plan_page_sections
from .stage_extract import NO_IMAGES_WARNING, ContentExtractor
from .stage_headings import HeadingDetector, map_images_to_sections

logger = logging.getLogger(__name__)


# Stream markers of embedded images: XObjects, JPEG, Flate (PNG-like), JPEG2000
IMAGE_MARKERS = (b"/Image", b"/XObject", b"/DCTDecode", b"/FlateDecode", b"/JPXDecode")


def pdf_likely_has_images(pdf_bytes: bytes, scan_bytes: int = None) -> bool:
    """Cheap check for image markers in the start of a PDF.

    False positives only cost a full extraction; false negatives skip real
    images, which is accepted.
    """
    if scan_bytes is None:
        scan_bytes = settings.image_marker_scan_bytes
    head = pdf_bytes[:min(len(pdf_bytes), scan_bytes)]
    return any(marker in head for marker in IMAGE_MARKERS)


def empty_mappings(section_titles: list[str]) -> list[SectionImageMapping]:
    return SectionBucketTable.literal(section_titles).to_list()


def attach_images_to_guide(
    guide: Guide,
    section_images: dict[str, list[UploadedImage]],
) -> int:
    """Set ``images`` on every area that received uploads.

    Uploads are looked up by area id, then by area name. Other areas are
    left untouched.

    Returns:
        Number of areas updated.
    """
    updated = 0
    for area in guide.areas:
        uploaded = section_images.get(area.id) or section_images.get(area.name)
        if uploaded:
            area.images = [image.public_url for image in uploaded]
            updated += 1
    return updated


class ImagePipeline:
    """Runs the image pipeline for one guide."""

    def __init__(
        self,
        storage: ImageStorage,
        extractor: Optional[ContentExtractor] = None,
        heading_detector: Optional[HeadingDetector] = None,
        upload_batch_size: int = None,
    ):
        """Initialize pipeline.

        Args:
            storage: Gateway used to delete, save and publish images
            extractor: PDF content extractor (default: settings-driven)
            heading_detector: Detector for the fallback path
            upload_batch_size: Concurrent uploads (default from settings)
        """
        self.storage = storage
        self.extractor = extractor or ContentExtractor()
        self.heading_detector = heading_detector or HeadingDetector()
        self.upload_batch_size = upload_batch_size or settings.upload_batch_size

    def assign_sections(
        self,
        content: PdfContent,
        section_titles: list[str],
        result: ImagePipelineResult,
    ) -> list[SectionImageMapping]:
        """Pick a strategy and assign the extracted images to sections.

        Page text is preferred; detected headings are the fallback. With
        neither, every section is left without images.
        """
        try:
            if content.page_texts:
                plan = plan_page_sections(content.page_texts, section_titles)
                mappings = map_images_by_page_text(
                    content.images, content.page_texts, section_titles, plan=plan
                )
                result.strategy = MappingStrategy.PAGE_TEXT
                result.decisions = plan.decisions
                return mappings

            if content.text_blocks:
                headings = self.heading_detector.detect(content.text_blocks)
                if headings:
                    result.strategy = MappingStrategy.HEADINGS
                    return map_images_to_sections(content.images, headings, section_titles)
                result.warnings.append("No page text or headings available for mapping")
            else:
                result.warnings.append("No text available for image-to-section mapping")
        except Exception as err:
            logger.exception("Image mapping failed")
            result.warnings.append(f"Image mapping failed: {err}")

        result.strategy = MappingStrategy.NONE
        return empty_mappings(section_titles)

    def group_by_area(
        self,
        guide: Guide,
        mappings: list[SectionImageMapping],
    ) -> dict[str, list[ExtractedImage]]:
        """Area id to images, for every non-empty mapping matching an area."""
        section_image_map: dict[str, list[ExtractedImage]] = {}
        for mapping in mappings:
            if not mapping.images:
                continue

            area = next(
                (
                    a
                    for a in guide.areas
                    if a.name == mapping.section_title or a.id == mapping.normalised_title
                ),
                None,
            )
            if area is None:
                logger.warning("No guide area matches section %r", mapping.section_title)
                continue
            section_image_map.setdefault(area.id, []).extend(mapping.images)
        return section_image_map

    def process(self, pdf_bytes: bytes, guide: Guide, venue_id: str) -> ImagePipelineResult:
        """Process a PDF for images and attach them to the guide.

        Args:
            pdf_bytes: The original PDF file
            guide: Guide produced from the PDF text (modified in place)
            venue_id: Venue id, used for storage paths

        Returns:
            ImagePipelineResult with stats, warnings and the decision trace
        """
        result = ImagePipelineResult()

        # Step 1: Extract
        try:
            content = self.extractor.extract(pdf_bytes)
        except Exception as err:
            logger.warning("PDF content extraction failed: %s", err)
            result.warnings.append(f"PDF content extraction failed: {err}")
            return result

        result.images_extracted = len(content.images)
        result.warnings.extend(content.warnings)

        if not content.has_images:
            if NO_IMAGES_WARNING not in result.warnings:
                result.warnings.append(NO_IMAGES_WARNING)
            return result

        # Step 2: Assign
        mappings = self.assign_sections(content, guide.section_titles, result)

        assigned = sum(m.image_count for m in mappings)
        if assigned < len(content.images):
            result.warnings.append(
                f"{len(content.images) - assigned} image(s) could not be assigned to a section"
            )

        section_image_map = self.group_by_area(guide, mappings)

        # Step 3: Replace stored images
        try:
            delete_venue_images(self.storage, venue_id)
        except Exception as err:
            logger.warning("Failed to delete existing images for %s: %s", venue_id, err)
            result.warnings.append(f"Failed to delete existing images: {err}")

        try:
            upload = upload_batch_images(
                self.storage,
                venue_id,
                section_image_map,
                batch_size=self.upload_batch_size,
            )
        except Exception as err:
            logger.warning("Image upload failed for %s: %s", venue_id, err)
            result.warnings.append(f"Image upload failed: {err}")
            return result

        result.images_uploaded = upload.total_uploaded
        result.sections_with_images = len(upload.section_images) - len(upload.sections_without_images)

        # Step 4: Attach URLs
        attach_images_to_guide(guide, upload.section_images)

        logger.info(
            "Venue %s: %d image(s) extracted, %d uploaded to %d section(s)",
            venue_id,
            result.images_extracted,
            result.images_uploaded,
            result.sections_with_images,
        )
        return result


def process_pdf_images(
    pdf_bytes: bytes,
    guide: Guide,
    venue_id: str,
    storage: ImageStorage,
) -> ImagePipelineResult:
    """Run the pipeline unless the PDF almost certainly has no images."""
    if not pdf_likely_has_images(pdf_bytes):
        logger.info("No image markers in PDF for %s; skipping image pipeline", venue_id)
        return ImagePipelineResult(warnings=[NO_IMAGES_WARNING])
    return ImagePipeline(storage).process(pdf_bytes, guide, venue_id)
