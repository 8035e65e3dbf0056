import logging
from dataclasses import dataclass
from datetime import datetime

from file_gateway.keys import parse_key
from file_gateway.storage import ObjectMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileRecord:
    key: str
    file_id: str
    file_name: str
    size: int
    last_modified: datetime | None
    region: str | None = None
    owner_id: str | None = None


class FileService:
    def __init__(self, storage, partitioner, *, upload_ttl: int = 300, download_ttl: int = 3600):
        self.storage = storage
        self.partitioner = partitioner
        self.upload_ttl = upload_ttl
        self.download_ttl = download_ttl

    def issue_upload_url(self, key: str, content_type: str, ttl_seconds: int | None = None) -> str:
        ttl = ttl_seconds or self.upload_ttl
        url = self.storage.presign_put(key, content_type, ttl)
        logger.info("issued upload url key=%s content_type=%s ttl=%s", key, content_type, ttl)
        return url

    def issue_download_url(self, key: str, ttl_seconds: int | None = None) -> str:
        self.ensure_exists(key)
        ttl = ttl_seconds or self.download_ttl
        url = self.storage.presign_get(key, ttl)
        logger.info("issued download url key=%s ttl=%s", key, ttl)
        return url

    def ensure_exists(self, key: str) -> ObjectMetadata:
        return self.storage.head(key)

    def delete(self, key: str) -> None:
        self.ensure_exists(key)
        self.storage.delete(key)
        logger.info("deleted key=%s", key)

    def metadata(self, key: str) -> ObjectMetadata:
        return self.ensure_exists(key)

    def list_under(self, prefixes: list[str]) -> list[FileRecord]:
        records = []
        for prefix in prefixes:
            for summary in self.storage.list_objects(prefix):
                parsed = parse_key(summary.key)
                if not parsed.file_id:
                    continue
                records.append(
                    FileRecord(
                        key=summary.key,
                        file_id=parsed.file_id,
                        file_name=parsed.file_name,
                        size=summary.size,
                        last_modified=summary.last_modified,
                        **self.partitioner.describe(parsed.partition),
                    )
                )
        return records
