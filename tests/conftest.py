from datetime import datetime, timezone

import pytest

from file_gateway.errors import NotFoundError
from file_gateway.storage import ObjectMetadata, ObjectSummary


class FakeStorage:
    """In-memory stand-in for S3ObjectStorage that records every provider call."""

    def __init__(self):
        self.objects: dict[str, ObjectMetadata] = {}
        self.calls: list[tuple[str, str]] = []

    def put(self, key: str, content_type: str = "text/plain", size: int = 4) -> None:
        self.objects[key] = ObjectMetadata(
            content_type=content_type,
            size=size,
            last_modified=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            etag='"etag-' + key.rsplit("/", 1)[-1] + '"',
        )

    def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        self.calls.append(("presign_put", key))
        return f"https://fake-s3.local/{key}?op=put&ct={content_type}&expires={expires_in}"

    def presign_get(self, key: str, expires_in: int) -> str:
        self.calls.append(("presign_get", key))
        return f"https://fake-s3.local/{key}?op=get&expires={expires_in}"

    def head(self, key: str) -> ObjectMetadata:
        self.calls.append(("head", key))
        if key not in self.objects:
            raise NotFoundError()
        return self.objects[key]

    def list_objects(self, prefix: str) -> list[ObjectSummary]:
        self.calls.append(("list", prefix))
        return [
            ObjectSummary(key=key, size=meta.size, last_modified=meta.last_modified, etag=meta.etag)
            for key, meta in self.objects.items()
            if key.startswith(prefix)
        ]

    def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self.objects.pop(key, None)

    def actions(self) -> list[str]:
        return [action for action, _ in self.calls]


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()
