"""
S3-compatible object storage for device images.
"""

# Standard library imports
import asyncio
import logging
import re
import uuid
from typing import Any, Optional
from urllib.parse import unquote, urlparse

# External package imports
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

# Local application imports
from ...domain.exceptions import UnavailableError
from ...domain.gateways.object_storage_gateway import ImageBlob, ObjectStorageGateway

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def build_object_key(filename: str) -> str:
    """Unique object key: a uuid4 prefix plus the file name without whitespace"""
    compact_name = _WHITESPACE.sub("", filename or "") or "image"
    return f"{uuid.uuid4()}-{compact_name}"


def key_from_locator(locator: str) -> str:
    """Recover the object key from a locator URL (its last path segment)"""
    path = urlparse(locator).path or locator
    return unquote(path.rstrip("/").split("/")[-1])


class S3ObjectStorage(ObjectStorageGateway):
    """
    ObjectStorageGateway backed by an S3 bucket.

    boto3 is blocking, so every call runs in a worker thread. Timeouts are
    set on the botocore client and retries are disabled: a failed call
    surfaces immediately as UnavailableError.
    """

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
        client: Optional[Any] = None,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.public_base_url = (public_base_url or self._default_base_url(bucket, region, endpoint_url)).rstrip("/")

        if client is not None:
            self._client = client
        else:
            config = Config(
                signature_version="s3v4",
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            )
            self._client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                region_name=region,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                config=config,
            )

    @staticmethod
    def _default_base_url(bucket: str, region: str, endpoint_url: Optional[str]) -> str:
        if endpoint_url:
            return f"{endpoint_url.rstrip('/')}/{bucket}"
        return f"https://{bucket}.s3.{region}.amazonaws.com"

    async def put(self, blob: ImageBlob) -> str:
        """Upload an image and return its public URL"""
        key = build_object_key(blob.filename)
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=blob.data,
                ContentType=blob.content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise UnavailableError(f"Error uploading {blob.filename} to S3: {str(e)}", operation="put")

        locator = f"{self.public_base_url}/{key}"
        logger.debug(f"Uploaded {len(blob.data)} bytes to {locator}")
        return locator

    async def delete(self, locator: str) -> None:
        """Delete the object a locator points to"""
        key = key_from_locator(locator)
        try:
            await asyncio.to_thread(
                self._client.delete_object,
                Bucket=self.bucket,
                Key=key,
            )
        except (BotoCoreError, ClientError) as e:
            raise UnavailableError(f"Error deleting {key} from S3: {str(e)}", operation="delete")

        logger.debug(f"Deleted S3 object {key}")
