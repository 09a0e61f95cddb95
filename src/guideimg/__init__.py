"""Attach photographs from sensory audit PDFs to the areas of a venue guide."""

__version__ = "0.1.0"
