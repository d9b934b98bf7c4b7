"""Media uploads to Cloudinary (unsigned preset)."""

from udhyogunity.infrastructure.external.media.cloudinary import CloudinaryUploader, UploadedAsset

__all__ = ["CloudinaryUploader", "UploadedAsset"]
