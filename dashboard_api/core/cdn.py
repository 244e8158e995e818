"""
CDN upload service backed by S3.
Objects are written once under a stable key and served from the CDN base URL.
"""

import asyncio
import hashlib
import io
import logging
from typing import Optional, Dict, Any
import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from dashboard_api.core.config import config
from dashboard_api.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class CdnService:
    """
    Thin wrapper around an S3 bucket fronted by a CDN.
    The boto3 client is created lazily and shared by all requests.
    """

    _client: Optional[BaseClient] = None

    @classmethod
    def is_configured(cls) -> bool:
        return bool(config.cdn_bucket)

    @classmethod
    def _get_client(cls) -> BaseClient:
        if cls._client is None:
            boto_config = Config(
                region_name=config.aws_region or None,
                retries={
                    "max_attempts": 2,
                    "mode": "standard",
                },
                max_pool_connections=5,
                connect_timeout=5,
                read_timeout=10,
            )

            cls._client = boto3.client(
                "s3",
                aws_access_key_id=config.aws_access_key_id or None,
                aws_secret_access_key=config.aws_secret_access_key or None,
                config=boto_config,
            )

        return cls._client

    @classmethod
    def get_file_url(cls, file_key: str) -> str:
        """Public CDN URL of an uploaded object."""
        return f"{config.cdn_base_url.rstrip('/')}/{file_key}"

    @classmethod
    def _put_object(cls, file_content: bytes, file_key: str, content_type: str) -> str:
        client = cls._get_client()
        checksum: str = hashlib.md5(file_content).hexdigest()

        upload_params: Dict[str, Any] = {
            "Bucket": config.cdn_bucket,
            "Key": file_key,
            "Body": io.BytesIO(file_content),
            "ContentType": content_type,
            "Metadata": {"checksum": checksum},
        }

        try:
            client.put_object(**upload_params)
        except ClientError as e:
            error_code: str = e.response.get("Error", {}).get("Code", "Unknown")
            raise ExternalServiceError("CDN", f"upload failed [{error_code}]") from e
        except BotoCoreError as e:
            raise ExternalServiceError("CDN", str(e)) from e

        logger.info(f"Uploaded {len(file_content)} bytes to {file_key}")
        return cls.get_file_url(file_key)

    @classmethod
    async def upload_file(
        cls,
        file_content: bytes,
        file_key: str,
        content_type: str = "image/png",
    ) -> str:
        """
        Upload a small file in a single PUT request.
        boto3 is blocking, so the call runs in a worker thread.

        Returns:
            str: Public CDN URL of the object

        Raises:
            ExternalServiceError: If S3 rejects the upload
        """
        return await asyncio.to_thread(cls._put_object, file_content, file_key, content_type)
