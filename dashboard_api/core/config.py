from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
import os


class Config(BaseSettings):
    # Listener
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    keep_alive_timeout: int = Field(default=5, alias="KEEP_ALIVE_TIMEOUT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # CORS - "*" allows any origin
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./dashboard.db", alias="DB_URL"
    )
    db_auto_create: bool = Field(default=True, alias="DB_AUTO_CREATE")

    # Staging deployment hosts
    staging_backend_suffix: str = Field(
        default="backend-api.services", alias="STAGING_BACKEND_SUFFIX"
    )
    staging_frontend_suffix: str = Field(
        default="wacht.tech", alias="STAGING_FRONTEND_SUFFIX"
    )
    staging_mail_from_host: str = Field(
        default="dev.wacht.services", alias="STAGING_MAIL_FROM_HOST"
    )

    # CDN (S3) Configuration
    cdn_bucket: str = Field(default="", alias="CDN_BUCKET")
    cdn_base_url: str = Field(
        default="https://cdn.wacht.services", alias="CDN_BASE_URL"
    )
    aws_region: str = Field(default="", alias="MY_AWS_REGION")
    aws_access_key_id: str = Field(default="", alias="MY_AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(default="", alias="MY_AWS_SECRET_ACCESS_KEY")

    is_production: bool = (
        os.getenv("ENVIRONMENT", "development").lower() == "production"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        populate_by_name = True


# Instantiate the settings
config = Config()
