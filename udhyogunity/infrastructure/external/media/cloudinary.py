"""Cloudinary unsigned uploads (one multipart POST per file)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from udhyogunity.infrastructure.exceptions import UploadException

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


def format_folder(folder: str | None) -> str:
    """Cloudinary rejects leading or trailing slashes in folder names."""
    return (folder or "").strip("/")


@dataclass(frozen=True)
class UploadedAsset:
    url: str
    public_id: str
    original_name: str | None
    folder: str
    full_path: str
    file_name: str


class CloudinaryUploader:
    """Uploads bytes with an unsigned preset and describes the stored asset."""

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self._http = http_client
        self._timeout = timeout

    @property
    def upload_url(self) -> str:
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/upload"

    def _form_fields(self, folder: str, public_id: str) -> dict[str, str]:
        fields = {"upload_preset": self.upload_preset}
        if "/" in public_id:
            # Folder already embedded in the public_id.
            fields["public_id"] = public_id.rstrip("/")
        elif folder:
            fields["folder"] = folder
            if public_id:
                fields["public_id"] = public_id
        elif public_id:
            fields["public_id"] = public_id
        return fields

    async def upload(
        self,
        file_bytes: bytes,
        filename: str,
        folder: str = "",
        public_id: str = "",
    ) -> UploadedAsset:
        """Upload and return the asset description.

        Raises:
            UploadException: Non-2xx response, transport failure, or no secure_url.
        """
        folder = format_folder(folder)
        data = self._form_fields(folder, public_id)
        files = {"file": (filename, file_bytes)}
        try:
            if self._http is not None:
                response = await self._http.post(self.upload_url, data=data, files=files)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self.upload_url, data=data, files=files)
        except httpx.HTTPError as e:
            logger.error("Cloudinary upload of %s failed: %s", filename, e)
            raise UploadException(f"Cloudinary upload failed: {e}") from e

        if not response.is_success:
            logger.error("Cloudinary API error %s: %s", response.status_code, response.text)
            raise UploadException(
                f"Cloudinary upload failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        body = response.json()
        secure_url = body.get("secure_url")
        if not secure_url:
            raise UploadException("Cloudinary upload failed: no secure URL in response")
        stored_id = body.get("public_id") or ""
        *folder_parts, file_name = stored_id.split("/")
        return UploadedAsset(
            url=secure_url,
            public_id=stored_id,
            original_name=body.get("original_filename"),
            folder="/".join(folder_parts) or folder,
            full_path=stored_id,
            file_name=file_name,
        )
