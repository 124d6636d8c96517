"""File storage for bid card media and message attachments.

Uses S3 when AWS settings are complete, otherwise the Supabase Storage
bucket of the same name.
"""
import logging
from typing import List, Optional

from fastapi import HTTPException
from supabase import Client

from app.config import settings
from app.modules.media.s3_storage import S3Storage

logger = logging.getLogger(__name__)


def file_extension(file_name: Optional[str], default: str = "bin") -> str:
    if file_name and "." in file_name:
        ext = file_name.rsplit(".", 1)[1].lower()
        if ext:
            return ext
    return default


def media_type_for(content_type: Optional[str]) -> str:
    return "photo" if (content_type or "").startswith("image/") else "document"


class MediaStorage:
    def __init__(self, supabase: Client, bucket: str):
        self.supabase = supabase
        self.bucket = bucket
        self.s3_storage = None
        if settings.s3_configured:
            try:
                self.s3_storage = S3Storage(prefix=bucket)
            except Exception as e:
                logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")

    def upload(self, file_content: bytes, path: str, content_type: str = "application/octet-stream") -> str:
        """Store file_content at path and return the stored path"""
        if len(file_content) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds maximum size of {settings.max_upload_bytes} bytes"
            )
        if self.s3_storage:
            logger.info(f"Uploading to S3: {self.bucket}/{path}")
            return self.s3_storage.upload_file(file_content, path, content_type)
        logger.info(f"Uploading to Supabase Storage: {self.bucket}/{path}")
        self.supabase.storage.from_(self.bucket).upload(
            path,
            file_content,
            file_options={"content-type": content_type, "cache-control": "3600", "upsert": "false"}
        )
        return path

    def remove(self, paths: List[str]) -> bool:
        paths = [p for p in paths if p]
        if not paths:
            return True
        if self.s3_storage:
            return self.s3_storage.delete_files(paths)
        try:
            self.supabase.storage.from_(self.bucket).remove(paths)
            return True
        except Exception as e:
            logger.warning(f"Failed to remove files from Supabase Storage ({self.bucket}): {e}")
            return False

    def signed_url(self, path: str, expires_in: Optional[int] = None) -> Optional[str]:
        expires_in = expires_in or settings.signed_url_ttl_seconds
        try:
            if self.s3_storage:
                return self.s3_storage.presigned_url(path, expires_in)
            result = self.supabase.storage.from_(self.bucket).create_signed_url(path, expires_in)
            return (result or {}).get("signedURL") or (result or {}).get("signedUrl")
        except Exception as e:
            logger.warning(f"Failed to sign URL for {self.bucket}/{path}: {e}")
            return None

    def public_url(self, path: str) -> str:
        if self.s3_storage:
            return self.s3_storage.public_url(path)
        return self.supabase.storage.from_(self.bucket).get_public_url(path)
