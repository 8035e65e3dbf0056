import logging
from dataclasses import dataclass, field
from datetime import datetime

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from file_gateway.config import Settings
from file_gateway.errors import NotFoundError, ProviderError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass(frozen=True)
class ObjectMetadata:
    content_type: str | None
    size: int
    last_modified: datetime | None
    etag: str | None
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ObjectSummary:
    key: str
    size: int
    last_modified: datetime | None
    etag: str | None = None


def build_s3_client(settings: Settings):
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        endpoint_url=settings.s3_endpoint_url,
        config=Config(signature_version="s3v4"),
    )


class S3ObjectStorage:
    """Thin wrapper over an S3 client. Provider failures surface as gateway errors, unretried."""

    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStorage":
        return cls(build_s3_client(settings), settings.s3_bucket)

    def _provider_error(self, action: str, key: str, exc: Exception) -> ProviderError:
        logger.warning("s3 %s failed for key=%s: %s", action, key, exc)
        return ProviderError(f"Storage provider error during {action}")

    def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        try:
            return self.client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._provider_error("presign_put", key, exc) from exc

    def presign_get(self, key: str, expires_in: int) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._provider_error("presign_get", key, exc) from exc

    def head(self, key: str) -> ObjectMetadata:
        try:
            response = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in NOT_FOUND_CODES:
                raise NotFoundError() from exc
            raise self._provider_error("head", key, exc) from exc
        except BotoCoreError as exc:
            raise self._provider_error("head", key, exc) from exc

        return ObjectMetadata(
            content_type=response.get("ContentType"),
            size=response.get("ContentLength", 0),
            last_modified=response.get("LastModified"),
            etag=response.get("ETag"),
            metadata=response.get("Metadata", {}),
        )

    def list_objects(self, prefix: str) -> list[ObjectSummary]:
        paginator = self.client.get_paginator("list_objects_v2")
        objects = []
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for item in page.get("Contents", []):
                    objects.append(
                        ObjectSummary(
                            key=item["Key"],
                            size=item.get("Size", 0),
                            last_modified=item.get("LastModified"),
                            etag=item.get("ETag"),
                        )
                    )
        except (ClientError, BotoCoreError) as exc:
            raise self._provider_error("list", prefix, exc) from exc
        return objects

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._provider_error("delete", key, exc) from exc
