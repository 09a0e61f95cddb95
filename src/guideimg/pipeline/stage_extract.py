"""Content Extraction Stage - PDF bytes to page text, text blocks and images.

Uses PyMuPDF (fitz) for all three:
- per-page plain text (required; failure is fatal)
- font-annotated text lines (optional, for heading detection)
- embedded images re-encoded as PNG (optional; failure only warns)
"""

import logging
from typing import Optional

import fitz  # PyMuPDF

from guideimg.config import settings
from guideimg.models import ExtractedImage, PdfContent, TextBlock

logger = logging.getLogger(__name__)

NO_IMAGES_WARNING = "No images found in PDF"


class PdfExtractionError(RuntimeError):
    """The PDF could not be opened or its text could not be read."""


def open_pdf(pdf_bytes: bytes) -> fitz.Document:
    """Open PDF bytes, rejecting corrupt and password-protected files."""
    try:
        pdf_doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as err:
        raise PdfExtractionError(f"Failed to open PDF: {err}") from err

    if pdf_doc.needs_pass:
        pdf_doc.close()
        raise PdfExtractionError("Failed to extract text from PDF: document is encrypted")

    return pdf_doc


def pixmap_to_png(pdf_doc: fitz.Document, xref: int) -> Optional[bytes]:
    """Render an image xref as PNG bytes in RGB or grey.

    Returns:
        PNG bytes, or None for images without a colour space (stencil masks).
    """
    pix = fitz.Pixmap(pdf_doc, xref)
    if pix.colorspace is None:
        return None

    # CMYK and other wide colour spaces cannot be written as PNG
    if pix.n - pix.alpha >= 4:
        pix = fitz.Pixmap(fitz.csRGB, pix)
    if pix.alpha:
        pix = fitz.Pixmap(pix, 0)

    return pix.tobytes("png")


class ContentExtractor:
    """Extracts everything the image pipeline needs from a PDF.

    Text is mandatory: a PDF whose text cannot be read raises
    ``PdfExtractionError``. Images and text blocks are optional: failures
    there leave them empty and add a warning to the result.
    """

    def __init__(
        self,
        image_size_threshold: int = None,
        extract_text_blocks: bool = None,
    ):
        """Initialize extractor.

        Args:
            image_size_threshold: Skip images narrower or shorter than this
                many pixels (default from settings)
            extract_text_blocks: Also extract font-annotated text lines
                (default from settings)
        """
        self.image_size_threshold = (
            settings.image_size_threshold if image_size_threshold is None else image_size_threshold
        )
        self.extract_text_blocks = (
            settings.extract_text_blocks if extract_text_blocks is None else extract_text_blocks
        )

    def extract(self, pdf_bytes: bytes) -> PdfContent:
        """Extract text and images from a PDF.

        Args:
            pdf_bytes: The PDF file contents

        Returns:
            PdfContent with page texts, text blocks, images and warnings

        Raises:
            PdfExtractionError: If the PDF cannot be opened or read
        """
        pdf_doc = open_pdf(pdf_bytes)
        warnings: list[str] = []

        try:
            try:
                page_texts = self.extract_page_texts(pdf_doc)
            except Exception as err:
                logger.error("Text extraction failed: %s", err)
                raise PdfExtractionError(f"Failed to extract text from PDF: {err}") from err

            try:
                images = self.extract_images(pdf_doc, warnings)
            except Exception as err:
                logger.warning("Image extraction failed: %s", err)
                warnings.append(f"Image extraction failed: {err}")
                images = []
            else:
                if not images:
                    warnings.append(NO_IMAGES_WARNING)

            text_blocks: list[TextBlock] = []
            if self.extract_text_blocks:
                try:
                    text_blocks = self.extract_text_lines(pdf_doc)
                except Exception as err:
                    logger.warning("Text block extraction failed: %s", err)
                    warnings.append(f"Text block extraction failed: {err}")

            page_count = len(pdf_doc)
        finally:
            pdf_doc.close()

        logger.info(
            "Extracted %d page(s), %d image(s), %d text block(s)",
            page_count,
            len(images),
            len(text_blocks),
        )

        return PdfContent(
            images=images,
            page_texts=page_texts,
            text_blocks=text_blocks,
            page_count=page_count or len(page_texts),
            warnings=warnings,
        )

    def extract_page_texts(self, pdf_doc: fitz.Document) -> dict[int, str]:
        """Plain text of every page, keyed by 1-indexed page number."""
        page_texts = {}
        for page_num in range(len(pdf_doc)):
            page_texts[page_num + 1] = pdf_doc[page_num].get_text("text")
        return page_texts

    def extract_text_lines(self, pdf_doc: fitz.Document) -> list[TextBlock]:
        """Font-annotated text, one block per line.

        The font size of a line is its largest span; ``y`` is measured from
        the bottom of the page so that larger values come first.
        """
        blocks = []
        for page_num in range(len(pdf_doc)):
            page = pdf_doc[page_num]
            page_height = page.rect.height

            for block in page.get_text("dict").get("blocks", []):
                if block.get("type", 0) != 0:
                    continue
                for line in block.get("lines", []):
                    spans = [s for s in line.get("spans", []) if s.get("text", "").strip()]
                    if not spans:
                        continue

                    font_size = max(s.get("size", 0) for s in spans)
                    if font_size <= 0:
                        continue

                    blocks.append(
                        TextBlock(
                            text="".join(s["text"] for s in spans).strip(),
                            page=page_num + 1,
                            y=page_height - line["bbox"][1],
                            font_size=font_size,
                            font_name=spans[0].get("font", ""),
                        )
                    )
        return blocks

    def extract_images(
        self,
        pdf_doc: fitz.Document,
        warnings: Optional[list[str]] = None,
    ) -> list[ExtractedImage]:
        """Embedded images above the size threshold, in page order.

        ``index`` counts only the images kept on each page. An image that
        cannot be encoded is skipped, with a message appended to
        ``warnings`` when given.
        """
        images = []
        for page_num in range(len(pdf_doc)):
            page = pdf_doc[page_num]
            seen_xrefs = set()
            index = 0

            for img in page.get_images(full=True):
                xref, width, height, name = img[0], img[2], img[3], img[7]
                if xref in seen_xrefs:
                    continue
                seen_xrefs.add(xref)

                if width < self.image_size_threshold or height < self.image_size_threshold:
                    continue

                try:
                    data = pixmap_to_png(pdf_doc, xref)
                except Exception as err:
                    logger.warning("Skipping image %s on page %d: %s", name, page_num + 1, err)
                    if warnings is not None:
                        warnings.append(f"Skipped image {name} on page {page_num + 1}: {err}")
                    continue
                if data is None:
                    continue

                images.append(
                    ExtractedImage(
                        page=page_num + 1,
                        index=index,
                        width=width,
                        height=height,
                        name=name,
                        data=data,
                    )
                )
                index += 1

        return images

    def extract_text_only(self, pdf_bytes: bytes) -> str:
        """Whole-document text, for the LLM transformation step.

        Raises:
            PdfExtractionError: If the PDF cannot be opened or read
        """
        pdf_doc = open_pdf(pdf_bytes)
        try:
            return "\n".join(self.extract_page_texts(pdf_doc).values())
        except Exception as err:
            raise PdfExtractionError(f"Failed to extract text from PDF: {err}") from err
        finally:
            pdf_doc.close()
