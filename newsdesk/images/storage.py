"""Object storage for re-hosted images."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ObjectStorageError


class ObjectStorage(ABC):
    """Write-only, append-style object store."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under key and return the public URL."""


class S3ObjectStorage(ObjectStorage):
    """S3-compatible bucket, e.g. Cloudflare R2."""

    def __init__(
        self,
        bucket: str,
        public_url: str,
        endpoint_url: Optional[str] = None,
        region: str = "auto",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")
        self.client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url.rstrip("/") if endpoint_url else None,
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    @classmethod
    def from_config(cls, storage_config: Dict[str, Any]) -> Optional["S3ObjectStorage"]:
        """Build from Config.get_object_storage_config(); None when not configured."""
        if not storage_config.get("bucket") or not storage_config.get("public_url"):
            return None
        return cls(
            bucket=storage_config["bucket"],
            public_url=storage_config["public_url"],
            endpoint_url=storage_config.get("endpoint_url"),
            region=storage_config.get("region") or "auto",
            access_key_id=storage_config.get("access_key_id"),
            secret_access_key=storage_config.get("secret_access_key"),
        )

    def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise ObjectStorageError(f"Upload of {key} failed: {e}") from e
        return f"{self.public_url}/{key}"


class MemoryObjectStorage(ObjectStorage):
    """Keeps uploaded objects in a dict."""

    def __init__(self, public_url: str = "https://images.example.test") -> None:
        self.public_url = public_url.rstrip("/")
        self.objects: Dict[str, tuple] = {}

    def put(self, key: str, data: bytes, content_type: str) -> str:
        if key in self.objects:
            raise ObjectStorageError(f"Refusing to overwrite {key}")
        self.objects[key] = (data, content_type)
        return f"{self.public_url}/{key}"
