# posts product images to the external image host
from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional, Union

import httpx

from utils.logger import get_logger

_logger = get_logger(__name__)

UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


class UploadError(Exception):
    pass


class AssetUploader:
    """
    Unsigned uploads: the file goes up as multipart form data together with
    an upload preset, the host answers with JSON holding ``secure_url``.
    """

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self._transport = transport

    @property
    def url(self) -> str:
        return UPLOAD_URL.format(cloud_name=self.cloud_name)

    async def upload(self, path: Union[str, Path]) -> str:
        """Upload one file and return its public URL."""
        path = Path(path).expanduser()
        if not path.is_file():
            raise UploadError(f"No such file: {path}")

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        _logger.info(f"Uploading {path.name} ({content_type})...")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                with open(path, "rb") as f:
                    resp = await client.post(
                        self.url,
                        data={"upload_preset": self.upload_preset},
                        files={"file": (path.name, f, content_type)},
                    )
            result = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.error(f"Upload of {path.name} failed: {exc}")
            raise UploadError("Upload failed") from exc

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            _logger.error(f"Upload of {path.name} returned no secure_url: {result}")
            raise UploadError("Upload failed")
        return secure_url
