from typing import Optional
from fastapi import UploadFile
import logging

from core.exceptions import MissingVideo, ValidationError

logger = logging.getLogger(__name__)

class MediaHandler:
    """
    Validates uploaded reel videos before they are forwarded to the media host.
    """

    # Allowed MIME types
    ALLOWED_VIDEO_TYPES = [
        'video/mp4',
        'video/quicktime',
        'video/x-msvideo',
        'video/x-ms-wmv',
        'video/x-flv',
        'video/webm',
        'video/x-matroska',
        'video/mpeg',
    ]

    # Browsers send this when they cannot tell the type
    GENERIC_TYPES = ['application/octet-stream', '']

    def __init__(self, max_upload_mb: int = 100):
        """
        Initialize the media handler.

        Args:
            max_upload_mb: Largest accepted upload in megabytes
        """
        self.max_size = max_upload_mb * 1024 * 1024

    async def read_video(self, file: Optional[UploadFile]) -> bytes:
        """
        Read and validate an uploaded video.

        Args:
            file: The uploaded file, or None when the form field was absent

        Returns:
            The raw video bytes

        Raises:
            MissingVideo: If no file or an empty file was sent
            ValidationError: If the type is not a video or the file is too large
        """
        if file is None or not file.filename:
            raise MissingVideo()

        content_type = (file.content_type or '').split(';')[0].strip().lower()
        if content_type not in self.ALLOWED_VIDEO_TYPES and content_type not in self.GENERIC_TYPES:
            raise ValidationError(
                f"Invalid video type. Allowed types: {', '.join(self.ALLOWED_VIDEO_TYPES)}"
            )

        data = await file.read(self.max_size + 1)
        if not data:
            raise MissingVideo()
        if len(data) > self.max_size:
            raise ValidationError(f"File too large. Max size: {self.max_size // (1024 * 1024)}MB")

        logger.debug(f"Read video {file.filename} ({len(data)} bytes, {content_type or 'unknown type'})")
        return data
