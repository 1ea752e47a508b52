# Standard library imports
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

# External package imports
from motor.motor_asyncio import AsyncIOMotorCollection
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

# Local application imports
from ...domain.repositories.device_repository import DeviceRepository
from ...domain.models.device import Device, DeviceImage, DeviceOwner, Dimensions
from ...domain.constants import DeviceFields, UserFields
from ...domain.exceptions import UnavailableError
from .mongo_connection import get_device_collection, get_user_collection

logger = logging.getLogger(__name__)


def _to_object_id(value: Optional[str]) -> Optional[ObjectId]:
    if not value:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, ValueError, TypeError):
        return None


def _owner_reference(owner_id: str) -> Union[ObjectId, str]:
    """Owner ids are stored as ObjectId when they look like one"""
    object_id = _to_object_id(owner_id)
    return object_id if object_id is not None else owner_id


class MongoDeviceRepository(DeviceRepository):
    """MongoDB implementation of DeviceRepository"""

    def __init__(
        self,
        device_collection: Optional[AsyncIOMotorCollection] = None,
        user_collection: Optional[AsyncIOMotorCollection] = None,
    ) -> None:
        self.device_collection = device_collection if device_collection is not None else get_device_collection()
        self.user_collection = user_collection if user_collection is not None else get_user_collection()

    async def insert(self, device: Device) -> Device:
        """Insert a new device"""
        if not device:
            raise ValueError("Device cannot be None")

        try:
            device_dict = self._device_to_dict(device)
            result = await self.device_collection.insert_one(device_dict)
            new_document = await self.device_collection.find_one({DeviceFields.MONGO_ID: result.inserted_id})
        except PyMongoError as e:
            raise UnavailableError(f"Error inserting device: {str(e)}", operation="insert")

        if new_document is None:
            raise UnavailableError("Device was created but could not be retrieved", operation="insert")

        return self._document_to_device(new_document)

    async def find_by_id(
        self,
        device_id: str,
        owner_fields: Optional[Sequence[str]] = None,
    ) -> Optional[Device]:
        """Find device by ID"""
        object_id = _to_object_id(device_id)
        if object_id is None:
            return None

        try:
            document = await self.device_collection.find_one({DeviceFields.MONGO_ID: object_id})
            if document is None:
                return None

            device = self._document_to_device(document)
            if owner_fields is not None:
                owners = await self._load_owners([device.owner_id], owner_fields)
                device.owner = owners.get(device.owner_id)
            return device
        except PyMongoError as e:
            raise UnavailableError(f"Error finding device by ID: {str(e)}", operation="find_by_id")

    async def find_by_owner(self, owner_id: str) -> List[Device]:
        """Find all devices owned by a user"""
        if not owner_id:
            return []

        references: List[Any] = [owner_id]
        object_id = _to_object_id(owner_id)
        if object_id is not None:
            references.insert(0, object_id)

        try:
            cursor = self.device_collection.find({DeviceFields.OWNER_ID: {"$in": references}})
            devices = await self._collect_devices(cursor)
            return devices
        except PyMongoError as e:
            raise UnavailableError(f"Error listing devices for owner: {str(e)}", operation="find_by_owner")

    async def find_all(self, owner_fields: Optional[Sequence[str]] = None) -> List[Device]:
        """Find every device"""
        try:
            cursor = self.device_collection.find({})
            devices = await self._collect_devices(cursor)

            if owner_fields is not None and devices:
                owners = await self._load_owners((device.owner_id for device in devices), owner_fields)
                for device in devices:
                    device.owner = owners.get(device.owner_id)
            return devices
        except PyMongoError as e:
            raise UnavailableError(f"Error listing devices: {str(e)}", operation="find_all")

    async def update_by_id(
        self,
        device_id: str,
        updates: Dict[str, Any],
        owner_id: Optional[str] = None,
    ) -> Optional[Device]:
        """Apply field updates and return the updated device"""
        object_id = _to_object_id(device_id)
        if object_id is None:
            return None

        query: Dict[str, Any] = {DeviceFields.MONGO_ID: object_id}
        if owner_id is not None:
            query[DeviceFields.OWNER_ID] = _owner_reference(owner_id)

        changes = {k: v for k, v in updates.items() if k not in DeviceFields.IMMUTABLE}

        try:
            if not changes:
                document = await self.device_collection.find_one(query)
            else:
                document = await self.device_collection.find_one_and_update(
                    query,
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
        except PyMongoError as e:
            raise UnavailableError(f"Error updating device: {str(e)}", operation="update_by_id")

        if document is None:
            return None
        return self._document_to_device(document)

    async def delete_by_id(self, device_id: str) -> bool:
        """Delete device by ID"""
        object_id = _to_object_id(device_id)
        if object_id is None:
            return False

        try:
            result = await self.device_collection.delete_one({DeviceFields.MONGO_ID: object_id})
        except PyMongoError as e:
            raise UnavailableError(f"Error deleting device: {str(e)}", operation="delete_by_id")
        return result.deleted_count > 0

    async def _load_owners(
        self,
        owner_ids: Iterable[str],
        owner_fields: Sequence[str],
    ) -> Dict[str, DeviceOwner]:
        """Fetch the selected user fields for each owner id (the "populate" step)"""
        object_ids = {oid for oid in (_to_object_id(owner_id) for owner_id in owner_ids) if oid is not None}
        if not object_ids:
            return {}

        projection = {field_name: 1 for field_name in owner_fields}
        cursor = self.user_collection.find(
            {UserFields.MONGO_ID: {"$in": list(object_ids)}},
            projection,
        )

        owners: Dict[str, DeviceOwner] = {}
        async for document in cursor:
            owner = self._document_to_owner(document, owner_fields)
            owners[owner.id] = owner
        return owners

    async def _collect_devices(self, cursor: Any) -> List[Device]:
        """Map cursor documents to devices, skipping stored records that are not valid devices"""
        devices: List[Device] = []
        async for document in cursor:
            try:
                devices.append(self._document_to_device(document))
            except ValueError as e:
                logger.warning(f"Skipping invalid device document {document.get(DeviceFields.MONGO_ID)}: {e}")
        return devices

    def _document_to_owner(self, document: Dict[str, Any], owner_fields: Sequence[str]) -> DeviceOwner:
        """Convert a projected user document to a DeviceOwner"""
        selected = {name: document.get(name) for name in owner_fields}
        return DeviceOwner(
            id=str(document[UserFields.MONGO_ID]),
            name=selected.get(UserFields.NAME),
            surname=selected.get(UserFields.SURNAME),
            phone_number=selected.get(UserFields.PHONE_NUMBER),
            town=selected.get(UserFields.TOWN),
            street=selected.get(UserFields.STREET),
            region=selected.get(UserFields.REGION),
        )

    def _document_to_device(self, document: Dict[str, Any]) -> Device:
        """Convert MongoDB document to Device domain model"""
        if not document or DeviceFields.MONGO_ID not in document:
            raise ValueError("Invalid document: missing _id field")

        dimensions = document.get(DeviceFields.DIMENSIONS) or {}
        owner_id = document.get(DeviceFields.OWNER_ID)

        return Device(
            id=str(document[DeviceFields.MONGO_ID]),
            owner_id=str(owner_id) if owner_id is not None else "",
            title=document.get(DeviceFields.TITLE, ""),
            description=document.get(DeviceFields.DESCRIPTION),
            manufacturer=document.get(DeviceFields.MANUFACTURER, ""),
            device_model=document.get(DeviceFields.DEVICE_MODEL, ""),
            condition=document.get(DeviceFields.CONDITION, ""),
            battery_capacity=document.get(DeviceFields.BATTERY_CAPACITY, 0),
            weight=document.get(DeviceFields.WEIGHT, 0),
            type_c=document.get(DeviceFields.TYPE_C, 0),
            type_a=document.get(DeviceFields.TYPE_A, 0),
            sockets=document.get(DeviceFields.SOCKETS, 0),
            remote_use=document.get(DeviceFields.REMOTE_USE, ""),
            dimensions=Dimensions(
                length=str(dimensions.get("length", "")),
                width=str(dimensions.get("width", "")),
                height=str(dimensions.get("height", "")),
            ),
            battery_type=document.get(DeviceFields.BATTERY_TYPE, ""),
            signal_shape=document.get(DeviceFields.SIGNAL_SHAPE, ""),
            additional=document.get(DeviceFields.ADDITIONAL),
            images=[
                DeviceImage(
                    url=image.get(DeviceFields.IMAGE_URL, ""),
                    width=image.get(DeviceFields.IMAGE_WIDTH, 0),
                    height=image.get(DeviceFields.IMAGE_HEIGHT, 0),
                )
                for image in document.get(DeviceFields.IMAGES, [])
            ],
            price=document.get(DeviceFields.PRICE, 0),
            min_rent_term=document.get(DeviceFields.MIN_RENT_TERM, 0),
            max_rent_term=document.get(DeviceFields.MAX_RENT_TERM, 0),
            policy_agreement=bool(document.get(DeviceFields.POLICY_AGREEMENT, False)),
            is_in_rent=bool(document.get(DeviceFields.IS_IN_RENT, False)),
        )

    def _device_to_dict(self, device: Device) -> Dict[str, Any]:
        """Convert Device domain model to MongoDB document"""
        if not device:
            raise ValueError("Device cannot be None")

        device_dict: Dict[str, Any] = {
            DeviceFields.TITLE: device.title,
            DeviceFields.MANUFACTURER: device.manufacturer,
            DeviceFields.DEVICE_MODEL: device.device_model,
            DeviceFields.CONDITION: device.condition,
            DeviceFields.BATTERY_CAPACITY: device.battery_capacity,
            DeviceFields.WEIGHT: device.weight,
            DeviceFields.TYPE_C: device.type_c,
            DeviceFields.TYPE_A: device.type_a,
            DeviceFields.SOCKETS: device.sockets,
            DeviceFields.REMOTE_USE: device.remote_use,
            DeviceFields.DIMENSIONS: {
                "length": device.dimensions.length,
                "width": device.dimensions.width,
                "height": device.dimensions.height,
            },
            DeviceFields.BATTERY_TYPE: device.battery_type,
            DeviceFields.SIGNAL_SHAPE: device.signal_shape,
            DeviceFields.IMAGES: [
                {
                    DeviceFields.IMAGE_URL: image.url,
                    DeviceFields.IMAGE_WIDTH: image.width,
                    DeviceFields.IMAGE_HEIGHT: image.height,
                }
                for image in device.images
            ],
            DeviceFields.PRICE: device.price,
            DeviceFields.MIN_RENT_TERM: device.min_rent_term,
            DeviceFields.MAX_RENT_TERM: device.max_rent_term,
            DeviceFields.POLICY_AGREEMENT: device.policy_agreement,
            DeviceFields.IS_IN_RENT: device.is_in_rent,
            DeviceFields.OWNER_ID: _owner_reference(device.owner_id),
        }

        # Optional text fields are only stored when present
        if device.description is not None:
            device_dict[DeviceFields.DESCRIPTION] = device.description
        if device.additional is not None:
            device_dict[DeviceFields.ADDITIONAL] = device.additional

        object_id = _to_object_id(device.id)
        if object_id is not None:
            device_dict[DeviceFields.MONGO_ID] = object_id

        return device_dict
