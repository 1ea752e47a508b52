from .mongo_connection import close_database, get_database, get_device_collection, get_user_collection
from .mongo_device_repository import MongoDeviceRepository

__all__ = [
    "close_database",
    "get_database",
    "get_device_collection",
    "get_user_collection",
    "MongoDeviceRepository",
]
