from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.gateways.object_storage_gateway import ObjectStorageGateway
from ...infrastructure.storage.s3_object_storage import S3ObjectStorage

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class StorageProvider:
    """Object storage provider - registers the image blob store"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """Register the S3 gateway as the ObjectStorageGateway singleton"""
        settings = get_settings()

        container.register_singleton(
            ObjectStorageGateway,
            S3ObjectStorage(
                bucket=settings.s3_bucket_name,
                region=settings.aws_region,
                access_key_id=settings.aws_access_key_id,
                secret_access_key=settings.aws_secret_access_key,
                endpoint_url=settings.s3_endpoint_url,
                public_base_url=settings.s3_public_base_url,
                connect_timeout=settings.s3_connect_timeout_seconds,
                read_timeout=settings.s3_read_timeout_seconds,
            )
        )
