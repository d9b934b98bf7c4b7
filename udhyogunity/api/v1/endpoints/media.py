"""Media API: forwards product, service and review images to Cloudinary."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from udhyogunity.api.v1.dependencies import get_cloudinary_uploader
from udhyogunity.infrastructure.external.media import CloudinaryUploader
from udhyogunity.schemas.media import UploadedAssetResponse

router = APIRouter()


@router.post("", response_model=UploadedAssetResponse, status_code=201)
async def upload_media(
    file: Annotated[UploadFile, File()],
    uploader: Annotated[CloudinaryUploader, Depends(get_cloudinary_uploader)],
    folder: Annotated[str, Form()] = "",
    public_id: Annotated[str, Form()] = "",
):
    content = await file.read()
    asset = await uploader.upload(
        content, file.filename or "upload", folder=folder, public_id=public_id
    )
    return UploadedAssetResponse(
        url=asset.url,
        public_id=asset.public_id,
        original_name=asset.original_name,
        folder=asset.folder,
        full_path=asset.full_path,
        file_name=asset.file_name,
    )
