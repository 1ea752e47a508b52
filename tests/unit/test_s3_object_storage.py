"""
Unit tests for the S3 object storage gateway (boto3 client mocked).
"""
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from ecorent.domain.exceptions import UnavailableError
from ecorent.domain.gateways.object_storage_gateway import ImageBlob
from ecorent.infrastructure.storage.s3_object_storage import (
    S3ObjectStorage,
    build_object_key,
    key_from_locator,
)


def _client_error(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "InternalError", "Message": "boom"}}, operation)


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def storage(s3_client):
    return S3ObjectStorage(bucket="eco-rent-images", region="eu-central-1", client=s3_client)


class TestObjectKeys:
    """Tests for key helpers"""

    def test_key_strips_whitespace_and_is_unique(self):
        first = build_object_key("my photo 1.jpg")
        second = build_object_key("my photo 1.jpg")
        assert first.endswith("-myphoto1.jpg")
        assert first != second

    def test_key_for_empty_filename(self):
        assert build_object_key("").endswith("-image")

    def test_key_from_locator(self):
        url = "https://eco-rent-images.s3.eu-central-1.amazonaws.com/abc-photo.jpg"
        assert key_from_locator(url) == "abc-photo.jpg"


class TestS3ObjectStorage:
    """Tests for put and delete"""

    @pytest.mark.asyncio
    async def test_put_uploads_and_returns_url(self, storage, s3_client):
        blob = ImageBlob(filename="front view.png", content_type="image/png", data=b"png-bytes")

        locator = await storage.put(blob)

        kwargs = s3_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "eco-rent-images"
        assert kwargs["Body"] == b"png-bytes"
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["Key"].endswith("-frontview.png")
        assert locator == f"https://eco-rent-images.s3.eu-central-1.amazonaws.com/{kwargs['Key']}"

    @pytest.mark.asyncio
    async def test_public_base_url_override(self, s3_client):
        storage = S3ObjectStorage(
            bucket="eco-rent-images",
            region="eu-central-1",
            public_base_url="https://cdn.example.com/images/",
            client=s3_client,
        )

        locator = await storage.put(ImageBlob(filename="a.jpg", content_type="image/jpeg", data=b"x"))

        assert locator.startswith("https://cdn.example.com/images/")

    @pytest.mark.asyncio
    async def test_delete_uses_key_from_locator(self, storage, s3_client):
        await storage.delete("https://eco-rent-images.s3.eu-central-1.amazonaws.com/abc-photo.jpg")

        s3_client.delete_object.assert_called_once_with(Bucket="eco-rent-images", Key="abc-photo.jpg")

    @pytest.mark.asyncio
    async def test_put_failure_is_unavailable(self, storage, s3_client):
        s3_client.put_object.side_effect = _client_error("PutObject")

        with pytest.raises(UnavailableError) as exc_info:
            await storage.put(ImageBlob(filename="a.jpg", content_type="image/jpeg", data=b"x"))
        assert exc_info.value.operation == "put"

    @pytest.mark.asyncio
    async def test_delete_failure_is_unavailable(self, storage, s3_client):
        s3_client.delete_object.side_effect = _client_error("DeleteObject")

        with pytest.raises(UnavailableError):
            await storage.delete("https://eco-rent-images.s3.eu-central-1.amazonaws.com/abc.jpg")
