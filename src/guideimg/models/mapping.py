"""Models produced by heading detection and image-to-section assignment."""

from typing import Optional

from pydantic import Field

from .base import AssignmentRule, BaseIRModel
from .content import ExtractedImage


class DetectedHeading(BaseIRModel):
    """Heading found through font-size statistics."""

    text: str
    page: int = Field(..., ge=1)
    y: float = 0.0
    font_size: float = Field(..., gt=0)
    normalised_text: str = Field(..., description="normalise_text(text), used for matching")


class SectionImageMapping(BaseIRModel):
    """Images assigned to one section title."""

    section_title: str = Field(..., description="Title as it appears in the guide")
    normalised_title: str
    images: list[ExtractedImage] = Field(default_factory=list)

    @property
    def image_count(self) -> int:
        return len(self.images)


class SectionMatch(BaseIRModel):
    """A known section title found on a line of page text."""

    title: str
    line_index: int = Field(..., ge=0)


class PageDecision(BaseIRModel):
    """Why a page's images went where they went."""

    page: int = Field(..., ge=1)
    rule: AssignmentRule
    section: Optional[str] = Field(None, description="Section owning the page's images")
    headings: list[str] = Field(default_factory=list, description="Titles found on the page")


class PageSectionPlan(BaseIRModel):
    """Result of folding the page-ownership rules over every page."""

    page_to_section: dict[int, str] = Field(default_factory=dict)
    page_sections: dict[int, list[str]] = Field(
        default_factory=dict, description="Every title found per page, in line order"
    )
    final_continuation: Optional[str] = None
    decisions: list[PageDecision] = Field(default_factory=list)
