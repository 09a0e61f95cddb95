"""Models for content extracted from a PDF."""

from pydantic import Field

from .base import BaseIRModel


class ExtractedImage(BaseIRModel):
    """An embedded image together with the page it was found on."""

    page: int = Field(..., ge=1, description="1-indexed page number")
    index: int = Field(..., ge=0, description="Order within the page (0-based)")
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    name: str = ""
    data: bytes = Field(default=b"", repr=False, description="PNG-encoded image bytes")


class TextBlock(BaseIRModel):
    """A line of text annotated with its font.

    ``y`` follows the PDF convention: it grows upward, so a larger value
    means earlier on the page.
    """

    text: str
    page: int = Field(..., ge=1)
    y: float = 0.0
    font_size: float = Field(..., gt=0)
    font_name: str = ""


class PdfContent(BaseIRModel):
    """Everything one pipeline run needs from the PDF. Never persisted."""

    images: list[ExtractedImage] = Field(default_factory=list)
    page_texts: dict[int, str] = Field(default_factory=dict, description="Raw text per page")
    text_blocks: list[TextBlock] = Field(default_factory=list)
    page_count: int = Field(default=0, ge=0)
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_images(self) -> bool:
        return len(self.images) > 0
