"""Guide and upload models touched by the image pipeline."""

from typing import Optional

from pydantic import Field

from .base import BaseIRModel, MappingStrategy
from .mapping import PageDecision


class Area(BaseIRModel):
    """
    One area of a venue guide.

    Only the fields this pipeline reads or writes are declared; the rest of
    the LLM-generated area is preserved untouched.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    images: Optional[list[str]] = Field(None, description="Public image URLs")

    class Config:
        from_attributes = True
        extra = "allow"


class Guide(BaseIRModel):
    """A venue guide; mutated in place when images are attached."""

    areas: list[Area] = Field(default_factory=list)

    class Config:
        from_attributes = True
        extra = "allow"

    @property
    def section_titles(self) -> list[str]:
        return [area.name for area in self.areas]


class AreaImageUpdate(BaseIRModel):
    """Replacement image list for one area, as sent by an editor."""

    id: str
    images: list[str] = Field(default_factory=list)


class UploadedImage(BaseIRModel):
    """An image stored and published for a guide."""

    storage_path: str = Field(..., description="venues/{venue_id}/images/{filename}")
    public_url: str
    width: int = 0
    height: int = 0


class BatchUploadResult(BaseIRModel):
    """Outcome of uploading every section's images."""

    total_uploaded: int = 0
    section_images: dict[str, list[UploadedImage]] = Field(default_factory=dict)
    sections_without_images: list[str] = Field(default_factory=list)


class ImagePipelineResult(BaseIRModel):
    """Stats returned alongside the mutated guide."""

    images_extracted: int = 0
    images_uploaded: int = 0
    sections_with_images: int = 0
    warnings: list[str] = Field(default_factory=list)
    strategy: Optional[MappingStrategy] = None
    decisions: list[PageDecision] = Field(default_factory=list)
