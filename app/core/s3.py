import logging
from dataclasses import dataclass, field
from typing import Dict, Optional
import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from app.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """An object storage call failed."""


class StorageObjectNotFound(StorageError):
    """The requested key does not exist in the bucket."""


@dataclass
class StoredObject:
    body: bytes
    content_type: str = "application/octet-stream"
    metadata: Dict[str, str] = field(default_factory=dict)


class S3Service:
    """
    Thin async wrapper over an S3-compatible bucket (MinIO in development,
    AWS S3 in production).
    """

    def __init__(self):
        self.session = aioboto3.Session(
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            region_name=settings.S3_REGION
        )
        self.bucket_name = settings.S3_BUCKET_NAME

    def _client(self):
        options = {}
        if settings.uses_minio:
            # MinIO needs an explicit endpoint and path-style addressing
            options["endpoint_url"] = settings.S3_ENDPOINT
            options["config"] = Config(s3={"addressing_style": "path"})
        return self.session.client("s3", **options)

    async def ensure_bucket(self) -> bool:
        """
        Create the bucket when it does not exist yet.
        """
        async with self._client() as s3_client:
            try:
                await s3_client.head_bucket(Bucket=self.bucket_name)
                logger.info(f'Bucket "{self.bucket_name}" already exists')
                return False
            except ClientError as e:
                code = e.response.get("Error", {}).get("Code")
                if code not in ("404", "NoSuchBucket", "NotFound"):
                    raise StorageError(f"Cannot inspect bucket {self.bucket_name}") from e

            await s3_client.create_bucket(Bucket=self.bucket_name)
            logger.info(f'Bucket "{self.bucket_name}" created successfully')
            return True

    async def put_object(
        self,
        file_key: str,
        body: bytes,
        content_type: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Upload a whole object held in memory.
        """
        params = {
            "Bucket": self.bucket_name,
            "Key": file_key,
            "Body": body,
            "ContentType": content_type or "application/octet-stream",
        }
        if metadata:
            params["Metadata"] = metadata
        try:
            async with self._client() as s3_client:
                await s3_client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading {file_key} to S3: {e}")
            raise StorageError(f"Failed to upload {file_key}") from e

    async def get_object(self, file_key: str) -> StoredObject:
        try:
            async with self._client() as s3_client:
                response = await s3_client.get_object(Bucket=self.bucket_name, Key=file_key)
                async with response["Body"] as stream:
                    body = await stream.read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404"):
                raise StorageObjectNotFound(file_key) from e
            logger.error(f"Error downloading {file_key} from S3: {e}")
            raise StorageError(f"Failed to download {file_key}") from e
        except BotoCoreError as e:
            logger.error(f"Error downloading {file_key} from S3: {e}")
            raise StorageError(f"Failed to download {file_key}") from e

        return StoredObject(
            body=body,
            content_type=response.get("ContentType") or "application/octet-stream",
            metadata=response.get("Metadata") or {},
        )

    async def delete_object(self, file_key: str) -> None:
        try:
            async with self._client() as s3_client:
                await s3_client.delete_object(Bucket=self.bucket_name, Key=file_key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting {file_key} from S3: {e}")
            raise StorageError(f"Failed to delete {file_key}") from e

# Create singleton instance
s3 = S3Service()


def get_storage() -> S3Service:
    """
    Dependency returning the object storage service.
    """
    return s3

# Export the instance
__all__ = ['s3', 'get_storage', 'S3Service', 'StoredObject', 'StorageError', 'StorageObjectNotFound']
