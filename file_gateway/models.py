from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(CamelModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


class RegisterRequest(CamelModel):
    email: str
    password: str
    name: str


class LoginRequest(CamelModel):
    email: str
    password: str


class UserOut(CamelModel):
    id: str
    email: str
    name: str


class AuthData(CamelModel):
    user: UserOut
    token: str


class UploadUrlRequest(CamelModel):
    file_name: str
    content_type: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    region: str | None = None


class UploadUrlData(CamelModel):
    upload_url: str
    file_id: str
    key: str
    region: str | None = None
    content_type: str
    expires_in: int


class DownloadUrlData(CamelModel):
    download_url: str
    file_id: str
    expires_in: int


class FileOut(CamelModel):
    key: str
    file_id: str
    file_name: str
    region: str | None = None
    owner_id: str | None = None
    size: int
    last_modified: datetime | None = None


class FileListData(CamelModel):
    files: list[FileOut]
    count: int


class DeleteData(CamelModel):
    file_id: str


class MetadataData(CamelModel):
    file_id: str
    name: str
    content_type: str | None = None
    size: int
    last_modified: datetime | None = None
    etag: str | None = None
