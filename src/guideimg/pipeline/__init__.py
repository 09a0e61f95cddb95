"""Pipeline stages for attaching PDF images to guide sections.

Stages:
1. stage_extract - PDF bytes to page text, text blocks and PNG images
2. stage_headings - Font-size heading detection (fallback assignment)
3. stage_scan - Known section titles in plain page text
4. stage_assign - Page-text (primary) and page-order (last resort) assignment
5. orchestrator - Strategy selection, upload and guide update

Every stage except extraction and upload is pure and can be run on its own.
"""

from .buckets import SectionBucketTable
from .orchestrator import (
    ImagePipeline,
    attach_images_to_guide,
    pdf_likely_has_images,
    process_pdf_images,
)
from .report import CountCheck, compare_image_counts
from .stage_assign import (
    decide_page_section,
    map_images_by_page_order,
    map_images_by_page_text,
    plan_page_sections,
)
from .stage_extract import ContentExtractor, PdfExtractionError
from .stage_headings import (
    HeadingDetector,
    HeadingDetectorConfig,
    detect_headings,
    find_heading_for_image,
    map_images_to_sections,
)
from .stage_scan import find_close_match, find_section_titles_in_page

__all__ = [
    # Extraction
    "ContentExtractor",
    "PdfExtractionError",
    # Headings
    "HeadingDetector",
    "HeadingDetectorConfig",
    "detect_headings",
    "find_heading_for_image",
    "map_images_to_sections",
    # Page text
    "find_close_match",
    "find_section_titles_in_page",
    # Assignment
    "SectionBucketTable",
    "decide_page_section",
    "map_images_by_page_order",
    "map_images_by_page_text",
    "plan_page_sections",
    # Orchestration
    "ImagePipeline",
    "attach_images_to_guide",
    "pdf_likely_has_images",
    "process_pdf_images",
    # Verification
    "CountCheck",
    "compare_image_counts",
]
