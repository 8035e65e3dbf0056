import logging
import traceback

from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from file_gateway.auth import AuthService, bearer_token
from file_gateway.config import Settings, get_settings
from file_gateway.errors import GatewayError
from file_gateway.files import FileService
from file_gateway.keys import Identity, build_file_id, build_key, build_partitioner, display_name
from file_gateway.logging_config import setup_logging
from file_gateway.models import (
    AuthData,
    DeleteData,
    DownloadUrlData,
    Envelope,
    FileListData,
    FileOut,
    LoginRequest,
    MetadataData,
    RegisterRequest,
    UploadUrlData,
    UploadUrlRequest,
    UserOut,
)
from file_gateway.repository import InMemoryUserRepository
from file_gateway.signing import TokenSigner
from file_gateway.storage import S3ObjectStorage
from file_gateway.validators import validate_file_id, validate_login, validate_registration, validate_upload

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    storage=None,
    users: InMemoryUserRepository | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    storage = storage or S3ObjectStorage.from_settings(settings)
    partitioner = build_partitioner(settings.partition_strategy, settings.regions)
    files = FileService(
        storage,
        partitioner,
        upload_ttl=settings.upload_ttl_seconds,
        download_ttl=settings.download_ttl_seconds,
    )
    auth = AuthService(
        users if users is not None else InMemoryUserRepository(),
        TokenSigner(settings.jwt_secret, settings.jwt_expires_in_seconds),
    )

    app = FastAPI(title=settings.app_name)

    def error_response(status_code: int, message: str, exc: Exception | None = None) -> JSONResponse:
        content = {"success": False, "message": message}
        if exc is not None and settings.diagnostics_enabled:
            content["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(_: Request, exc: RequestValidationError):
        missing_fields = [
            ".".join(str(item) for item in error["loc"] if item != "body")
            for error in exc.errors()
            if error.get("type") == "missing"
        ]
        if missing_fields:
            message = f"missing parameters: {', '.join(missing_fields)}"
        else:
            message = "invalid request parameters"
        return error_response(400, message)

    @app.exception_handler(GatewayError)
    async def gateway_exception_handler(_: Request, exc: GatewayError):
        if exc.status_code >= 500:
            logger.error("request failed: %s", exc.message)
        return error_response(exc.status_code, exc.message, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_: Request, exc: StarletteHTTPException):
        message = str(exc.detail) if exc.detail else "request failed"
        return error_response(exc.status_code, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        logger.exception("unhandled error")
        return error_response(500, "Internal Server Error", exc)

    def current_identity(authorization: str | None = Header(default=None)) -> Identity:
        return auth.authenticate(bearer_token(authorization))

    def file_key(identity: Identity, file_id: str, region: str | None) -> str:
        validate_file_id(file_id)
        return build_key(partitioner.partition_for(identity, region), file_id)

    @app.get("/")
    def root() -> dict:
        return {"status": "ok", "service": settings.app_name}

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "environment": settings.app_env}

    @app.post("/api/auth/register", response_model=Envelope[AuthData], status_code=201)
    def register(payload: RegisterRequest):
        validate_registration(email=payload.email, password=payload.password, name=payload.name)
        user, token = auth.register(email=payload.email, password=payload.password, name=payload.name)
        return Envelope[AuthData](
            message="User registered successfully",
            data=AuthData(user=UserOut(id=user.id, email=user.email, name=user.name), token=token),
        )

    @app.post("/api/auth/login", response_model=Envelope[AuthData])
    def login(payload: LoginRequest):
        validate_login(email=payload.email, password=payload.password)
        user, token = auth.login(email=payload.email, password=payload.password)
        return Envelope[AuthData](
            message="Login successful",
            data=AuthData(user=UserOut(id=user.id, email=user.email, name=user.name), token=token),
        )

    @app.post(
        "/api/files/upload-url",
        response_model=Envelope[UploadUrlData],
        response_model_exclude_none=True,
    )
    def upload_url(payload: UploadUrlRequest, identity: Identity = Depends(current_identity)):
        upload = validate_upload(
            file_name=payload.file_name,
            content_type=payload.content_type,
            file_size=payload.file_size,
            allowed_types=settings.allowed_file_types,
            max_size_bytes=settings.max_file_size_bytes,
        )
        partition = partitioner.partition_for(identity, payload.region)
        file_id = build_file_id(upload.file_name)
        key = build_key(partition, file_id)
        url = files.issue_upload_url(key, upload.content_type)
        return Envelope[UploadUrlData](
            message="Upload URL generated successfully",
            data=UploadUrlData(
                upload_url=url,
                file_id=file_id,
                key=key,
                region=partitioner.describe(partition).get("region"),
                content_type=upload.content_type,
                expires_in=files.upload_ttl,
            ),
        )

    @app.get("/api/files/{file_id}/download-url", response_model=Envelope[DownloadUrlData])
    def download_url(
        file_id: str,
        region: str | None = Query(default=None),
        identity: Identity = Depends(current_identity),
    ):
        key = file_key(identity, file_id, region)
        url = files.issue_download_url(key)
        return Envelope[DownloadUrlData](
            message="Download URL generated successfully",
            data=DownloadUrlData(download_url=url, file_id=file_id, expires_in=files.download_ttl),
        )

    @app.get("/api/files", response_model=Envelope[FileListData], response_model_exclude_none=True)
    def list_files(region: str | None = Query(default=None), identity: Identity = Depends(current_identity)):
        records = files.list_under(partitioner.list_prefixes(identity, region))
        items = [
            FileOut(
                key=record.key,
                file_id=record.file_id,
                file_name=record.file_name,
                region=record.region,
                owner_id=record.owner_id,
                size=record.size,
                last_modified=record.last_modified,
            )
            for record in records
        ]
        return Envelope[FileListData](
            message="Files retrieved successfully",
            data=FileListData(files=items, count=len(items)),
        )

    @app.delete("/api/files/{file_id}", response_model=Envelope[DeleteData])
    def delete_file(
        file_id: str,
        region: str | None = Query(default=None),
        identity: Identity = Depends(current_identity),
    ):
        files.delete(file_key(identity, file_id, region))
        return Envelope[DeleteData](message="File deleted successfully", data=DeleteData(file_id=file_id))

    @app.get(
        "/api/files/{file_id}/metadata",
        response_model=Envelope[MetadataData],
        response_model_exclude_none=True,
    )
    def file_metadata(
        file_id: str,
        region: str | None = Query(default=None),
        identity: Identity = Depends(current_identity),
    ):
        meta = files.metadata(file_key(identity, file_id, region))
        return Envelope[MetadataData](
            message="File metadata retrieved successfully",
            data=MetadataData(
                file_id=file_id,
                name=display_name(file_id),
                content_type=meta.content_type,
                size=meta.size,
                last_modified=meta.last_modified,
                etag=meta.etag,
            ),
        )

    return app


app = create_app()
