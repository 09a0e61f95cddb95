"""IR models for the guide image pipeline.

Every model here is built fresh for one pipeline run and discarded when it
finishes; nothing is persisted except the uploaded images and the guide.

Model Hierarchy:
- PdfContent → ExtractedImage / TextBlock / page texts
- DetectedHeading, SectionMatch → SectionImageMapping
- PageSectionPlan → PageDecision (decision trace)
- Guide → Area; ImagePipelineResult summarises a run
"""

from .base import (
    AssignmentRule,
    BaseIRModel,
    MappingStrategy,
)
from .content import (
    ExtractedImage,
    PdfContent,
    TextBlock,
)
from .guide import (
    Area,
    AreaImageUpdate,
    BatchUploadResult,
    Guide,
    ImagePipelineResult,
    UploadedImage,
)
from .mapping import (
    DetectedHeading,
    PageDecision,
    PageSectionPlan,
    SectionImageMapping,
    SectionMatch,
)

__all__ = [
    # Base types
    "AssignmentRule",
    "BaseIRModel",
    "MappingStrategy",
    # Content
    "ExtractedImage",
    "PdfContent",
    "TextBlock",
    # Mapping
    "DetectedHeading",
    "PageDecision",
    "PageSectionPlan",
    "SectionImageMapping",
    "SectionMatch",
    # Guide
    "Area",
    "AreaImageUpdate",
    "BatchUploadResult",
    "Guide",
    "ImagePipelineResult",
    "UploadedImage",
]
