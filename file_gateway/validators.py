import re
from dataclasses import dataclass

from file_gateway.errors import ValidationError
from file_gateway.keys import sanitize_filename
from file_gateway.mime_types import content_type_matches, detect_content_type

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class UploadRequest:
    file_name: str
    content_type: str


def validate_upload(
    *,
    file_name: str,
    content_type: str | None,
    file_size: int | None,
    allowed_types: list[str],
    max_size_bytes: int,
) -> UploadRequest:
    if not file_name:
        raise ValidationError("fileName is required")
    file_name = sanitize_filename(file_name)

    if not content_type:
        content_type = detect_content_type(file_name)
        if not content_type:
            raise ValidationError(
                "Unable to determine content type from file extension. Please provide contentType."
            )
    elif not content_type_matches(file_name, content_type):
        expected = detect_content_type(file_name) or "unknown"
        raise ValidationError(
            f"Content type '{content_type}' does not match file extension. Expected '{expected}'."
        )

    if allowed_types and content_type not in allowed_types:
        raise ValidationError(f"File type {content_type} is not allowed")

    if file_size is not None and file_size > max_size_bytes:
        raise ValidationError(f"File size exceeds maximum allowed size of {max_size_bytes} bytes")

    return UploadRequest(file_name=file_name, content_type=content_type)


def validate_file_id(file_id: str) -> str:
    if not file_id:
        raise ValidationError("File ID is required")
    if ".." in file_id or "/" in file_id or "\\" in file_id:
        raise ValidationError("Invalid file ID")
    return file_id


def validate_registration(*, email: str, password: str, name: str) -> None:
    if not email or not password or not name.strip():
        raise ValidationError("Email, password, and name are required")
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def validate_login(*, email: str, password: str) -> None:
    if not email or not password:
        raise ValidationError("Email and password are required")
