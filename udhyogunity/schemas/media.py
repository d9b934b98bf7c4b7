"""Media upload API schemas."""

from pydantic import BaseModel


class UploadedAssetResponse(BaseModel):
    """Stored asset; folder and file_name are derived from public_id."""

    url: str
    public_id: str
    original_name: str | None = None
    folder: str
    full_path: str
    file_name: str
