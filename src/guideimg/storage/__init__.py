"""Storage layer for published guide images.

Provides the storage gateway interface, Google Cloud Storage and local
filesystem implementations, and the upload helpers built on them.
"""

from .base import ImageStorage
from .gcs import GCSImageStorage
from .local import LocalImageStorage
from .uploads import (
    delete_venue_images,
    generate_filename,
    image_storage_path,
    sanitise_section_id,
    upload_batch_images,
    upload_image,
    upload_section_images,
    venue_image_prefix,
)

__all__ = [
    # Gateways
    "ImageStorage",
    "GCSImageStorage",
    "LocalImageStorage",
    # Uploads
    "delete_venue_images",
    "generate_filename",
    "image_storage_path",
    "sanitise_section_id",
    "upload_batch_images",
    "upload_image",
    "upload_section_images",
    "venue_image_prefix",
]
