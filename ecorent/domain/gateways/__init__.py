from .object_storage_gateway import ImageBlob, ObjectStorageGateway

__all__ = ["ImageBlob", "ObjectStorageGateway"]
