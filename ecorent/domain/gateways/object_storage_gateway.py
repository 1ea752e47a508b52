from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ImageBlob:
    """Binary attachment waiting to be stored"""
    filename: str
    content_type: str
    data: bytes


class ObjectStorageGateway(ABC):
    """Gateway interface - defines contract for blob storage of device images"""

    @abstractmethod
    async def put(self, blob: ImageBlob) -> str:
        """Store the blob and return a stable locator for it"""
        pass

    @abstractmethod
    async def delete(self, locator: str) -> None:
        """Delete the blob identified by a locator previously returned by put"""
        pass
