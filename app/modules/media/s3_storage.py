import boto3
from botocore.exceptions import ClientError
from app.config import settings
from typing import List
import logging

logger = logging.getLogger(__name__)


class S3Storage:
    def __init__(self, prefix: str = ""):
        if not settings.s3_configured:
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name
        # Keeps the logical Supabase bucket name as a key prefix so media and attachments don't collide
        self.prefix = prefix.strip("/")

    def _key(self, path: str) -> str:
        return f"{self.prefix}/{path}" if self.prefix else path

    def upload_file(self, file_content: bytes, path: str, content_type: str = "application/octet-stream") -> str:
        """Upload file to S3 and return the object path relative to the prefix"""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=self._key(path),
                Body=file_content,
                ContentType=content_type
            )
            return path
        except ClientError as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise

    def delete_files(self, paths: List[str]) -> bool:
        """Delete files from S3"""
        if not paths:
            return True
        try:
            self.s3_client.delete_objects(
                Bucket=self.bucket_name,
                Delete={"Objects": [{"Key": self._key(p)} for p in paths]}
            )
            return True
        except ClientError as e:
            logger.error(f"Failed to delete files from S3: {str(e)}")
            return False

    def presigned_url(self, path: str, expires_in: int) -> str:
        return self.s3_client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket_name, "Key": self._key(path)},
            ExpiresIn=expires_in
        )

    def public_url(self, path: str) -> str:
        return f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{self._key(path)}"
