from .s3_object_storage import S3ObjectStorage, build_object_key, key_from_locator

__all__ = ["S3ObjectStorage", "build_object_key", "key_from_locator"]
