from functools import lru_cache
from typing import Annotated, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "file-gateway"
    app_env: str = "production"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    jwt_secret: str = "change-me-in-production"
    jwt_expires_in_seconds: int = 7 * 24 * 3600

    partition_strategy: Literal["region", "user"] = "region"
    regions: Annotated[list[str], NoDecode] = ["UK", "IRE"]

    upload_ttl_seconds: int = 300
    download_ttl_seconds: int = 3600
    max_file_size_bytes: int = 10 * 1024 * 1024
    allowed_file_types: Annotated[list[str], NoDecode] = []

    s3_bucket: str = ""
    aws_region: str = "eu-west-2"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    s3_endpoint_url: str | None = None

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FGW_")

    @field_validator("regions", "allowed_file_types", mode="before")
    @classmethod
    def split_csv(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def diagnostics_enabled(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
