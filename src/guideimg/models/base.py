"""Base models and common types for the guide image pipeline."""

from enum import Enum

from pydantic import BaseModel


class MappingStrategy(str, Enum):
    """Which assigner turned images into per-section buckets."""

    PAGE_TEXT = "page_text"  # primary: known titles found in plain page text
    HEADINGS = "headings"  # fallback: font-size heading detection
    PAGE_ORDER = "page_order"  # last resort: one image per section in order
    NONE = "none"  # no usable text, every bucket left empty


class AssignmentRule(str, Enum):
    """Rule that decided which section owns a page's images."""

    STARTS_WITH_HEADING = "starts_with_heading"
    LATE_HEADING = "late_heading"  # last heading in the bottom quarter
    SINGLE_EARLY_HEADING = "single_early_heading"
    MULTIPLE_HEADINGS = "multiple_headings"
    MID_PAGE_HEADING = "mid_page_heading"
    NO_HEADING = "no_heading"  # pure continuation page
    ORDINAL_DISTRIBUTION = "ordinal_distribution"  # several images and sections


class BaseIRModel(BaseModel):
    """Base class for the transient models built during one pipeline run."""

    class Config:
        from_attributes = True
