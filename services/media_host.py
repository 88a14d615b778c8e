"""
Cloudinary media host client.

Wraps the Cloudinary SDK uploader. Only the two calls the application needs
are exposed: video upload and destroy. Credentials are passed per call so
several clients with different accounts can coexist in one process.
"""
import io
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse
import logging

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from config import Settings
from core.exceptions import MediaHostFailure

logger = logging.getLogger(__name__)

VERSION_SEGMENT = re.compile(r"^v\d+$")


@dataclass
class MediaUploadResult:
    public_id: str
    secure_url: str


class CloudinaryClient:
    """Uploads reel videos to Cloudinary and removes them again."""

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "reels",
        max_width: int = 720,
        timeout: float = 60.0,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.max_width = max_width
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryClient":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.MEDIA_FOLDER,
            max_width=settings.MEDIA_MAX_WIDTH,
            timeout=settings.MEDIA_HOST_TIMEOUT,
        )

    @property
    def transformation(self) -> List[Dict[str, Any]]:
        """Incoming transformation: width-limited, automatic quality."""
        return [{"width": self.max_width, "crop": "limit"}, {"quality": "auto"}]

    def _options(self, **options) -> Dict[str, Any]:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise MediaHostFailure("Media host is not configured")
        return dict(
            options,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            resource_type="video",
            timeout=self.timeout,
        )

    def upload_video(self, data: bytes, filename: str = "reel.mp4") -> MediaUploadResult:
        """
        Upload a video.

        Raises:
            MediaHostFailure: On any transport error or non-success response
        """
        options = self._options(folder=self.folder, transformation=self.transformation)
        stream = io.BytesIO(data)
        stream.name = filename
        try:
            payload = cloudinary.uploader.upload(stream, **options)
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise MediaHostFailure()

        secure_url = payload.get("secure_url")
        if not secure_url:
            logger.error(f"Cloudinary upload returned no secure_url: {payload}")
            raise MediaHostFailure()

        return MediaUploadResult(public_id=payload.get("public_id", ""), secure_url=secure_url)

    def destroy(self, public_id: str) -> bool:
        """
        Delete a video by public id.

        Returns:
            True if Cloudinary reports the asset deleted

        Raises:
            MediaHostFailure: On any transport error or non-success response
        """
        options = self._options(invalidate=True)
        try:
            payload = cloudinary.uploader.destroy(public_id, **options)
        except CloudinaryError as e:
            logger.error(f"Cloudinary destroy failed for {public_id}: {e}")
            raise MediaHostFailure("Failed to delete media")
        return payload.get("result") == "ok"

    @staticmethod
    def public_id_from_url(url: str) -> str:
        """
        Recover the public id from a delivery URL.

        The id is the path after ``/upload/`` and the optional ``v<version>``
        segment, without the file extension.
        """
        path = urlparse(url).path
        _, _, tail = path.partition("/upload/")
        segments = [s for s in (tail or path).split("/") if s]
        for index, segment in enumerate(segments):
            if VERSION_SEGMENT.match(segment):
                segments = segments[index + 1:]
                break
        if segments:
            segments[-1] = segments[-1].split(".")[0]
        return "/".join(segments)
