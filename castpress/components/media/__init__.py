"""
Media component - validated uploads and media cleanup.
"""

from .component import MediaCleaner, generate_key, run_delete_media, run_upload
from .models import MediaValidationError, UploadInput, UploadKind, UploadOutput

__all__ = [
    # Entry points
    "run_upload",
    "run_delete_media",
    "MediaCleaner",
    "generate_key",
    # Models
    "MediaValidationError",
    "UploadInput",
    "UploadKind",
    "UploadOutput",
]
