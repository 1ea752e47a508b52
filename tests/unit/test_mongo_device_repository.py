"""
Unit tests for MongoDeviceRepository with mocked motor collections.
"""
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from ecorent.domain.constants import UserFields
from ecorent.domain.exceptions import UnavailableError
from ecorent.domain.models.device import Device, DeviceImage, Dimensions
from ecorent.infrastructure.db.mongo_device_repository import MongoDeviceRepository


DEVICE_OID = ObjectId("507f1f77bcf86cd799439011")
OWNER_OID = ObjectId("507f1f77bcf86cd799439012")


class _AsyncCursor:
    """Minimal stand-in for a motor cursor"""

    def __init__(self, documents: List[Dict[str, Any]]) -> None:
        self._documents = list(documents)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._documents:
            raise StopAsyncIteration
        return self._documents.pop(0)


def _document(**overrides) -> Dict[str, Any]:
    document = {
        "_id": DEVICE_OID,
        "title": "Bluetti AC180",
        "manufacturer": "Bluetti",
        "deviceModel": "AC180",
        "condition": "used",
        "batteryCapacity": 1152,
        "weight": 16,
        "typeC": 1,
        "typeA": 4,
        "sockets": 2,
        "remoteUse": "app",
        "dimensions": {"length": "31", "width": "20", "height": "24"},
        "batteryType": "LiFePO4",
        "signalShape": "pure sine wave",
        "images": [{"url": "https://img/1.jpg", "width": 100, "height": 80}],
        "price": 300,
        "minRentTerm": 1,
        "maxRentTerm": 14,
        "policyAgreement": True,
        "isInRent": False,
        "ownerId": OWNER_OID,
    }
    document.update(overrides)
    return document


@pytest.fixture
def device_collection():
    collection = MagicMock()
    collection.find_one = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.delete_one = AsyncMock()
    return collection


@pytest.fixture
def user_collection():
    return MagicMock()


@pytest.fixture
def repo(device_collection, user_collection):
    return MongoDeviceRepository(device_collection=device_collection, user_collection=user_collection)


class TestFindById:
    """Tests for find_by_id"""

    @pytest.mark.asyncio
    async def test_document_mapped_to_device(self, repo, device_collection):
        device_collection.find_one.return_value = _document()

        device = await repo.find_by_id(str(DEVICE_OID))

        assert device.id == str(DEVICE_OID)
        assert device.owner_id == str(OWNER_OID)
        assert device.device_model == "AC180"
        assert device.images[0].url == "https://img/1.jpg"
        assert device.owner is None
        device_collection.find_one.assert_awaited_once_with({"_id": DEVICE_OID})

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, repo, device_collection):
        assert await repo.find_by_id("not-an-object-id") is None
        device_collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_document(self, repo, device_collection):
        device_collection.find_one.return_value = None
        assert await repo.find_by_id(str(DEVICE_OID)) is None

    @pytest.mark.asyncio
    async def test_owner_populated_with_projection(self, repo, device_collection, user_collection):
        device_collection.find_one.return_value = _document()
        user_collection.find.return_value = _AsyncCursor([
            {"_id": OWNER_OID, "name": "Olena", "surname": "Koval", "town": "Lviv"},
        ])

        device = await repo.find_by_id(str(DEVICE_OID), owner_fields=UserFields.OWNER_DETAIL_PROJECTION)

        assert device.owner.id == str(OWNER_OID)
        assert device.owner.name == "Olena"
        assert device.owner.town == "Lviv"
        query, projection = user_collection.find.call_args.args
        assert query == {"_id": {"$in": [OWNER_OID]}}
        assert set(projection) == set(UserFields.OWNER_DETAIL_PROJECTION)

    @pytest.mark.asyncio
    async def test_driver_error_is_unavailable(self, repo, device_collection):
        device_collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(UnavailableError):
            await repo.find_by_id(str(DEVICE_OID))


class TestListing:
    """Tests for find_by_owner and find_all"""

    @pytest.mark.asyncio
    async def test_find_by_owner_matches_object_id_and_string(self, repo, device_collection):
        device_collection.find.return_value = _AsyncCursor([_document()])

        devices = await repo.find_by_owner(str(OWNER_OID))

        assert len(devices) == 1
        query = device_collection.find.call_args.args[0]
        assert query == {"ownerId": {"$in": [OWNER_OID, str(OWNER_OID)]}}

    @pytest.mark.asyncio
    async def test_find_by_owner_empty_id(self, repo, device_collection):
        assert await repo.find_by_owner("") == []
        device_collection.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_all_populates_town_only(self, repo, device_collection, user_collection):
        device_collection.find.return_value = _AsyncCursor([
            _document(),
            _document(_id=ObjectId(), title="Second"),
        ])
        user_collection.find.return_value = _AsyncCursor([{"_id": OWNER_OID, "town": "Kyiv"}])

        devices = await repo.find_all(owner_fields=UserFields.OWNER_TOWN_PROJECTION)

        assert [device.owner.town for device in devices] == ["Kyiv", "Kyiv"]
        assert devices[0].owner.name is None
        assert user_collection.find.call_args.args[1] == {"town": 1}

    @pytest.mark.asyncio
    async def test_find_all_skips_invalid_documents(self, repo, device_collection, user_collection):
        orphan = _document(_id=ObjectId())
        del orphan["ownerId"]
        device_collection.find.return_value = _AsyncCursor([
            _document(),
            orphan,
            _document(_id=ObjectId(), title=""),
        ])
        user_collection.find.return_value = _AsyncCursor([{"_id": OWNER_OID, "town": "Kyiv"}])

        devices = await repo.find_all(owner_fields=UserFields.OWNER_TOWN_PROJECTION)

        assert [device.id for device in devices] == [str(DEVICE_OID)]
        assert devices[0].owner.town == "Kyiv"

    @pytest.mark.asyncio
    async def test_find_by_owner_skips_invalid_documents(self, repo, device_collection):
        device_collection.find.return_value = _AsyncCursor([_document(title="   "), _document()])

        devices = await repo.find_by_owner(str(OWNER_OID))

        assert len(devices) == 1
        assert devices[0].title == "Bluetti AC180"


class TestWrites:
    """Tests for insert, update_by_id and delete_by_id"""

    @pytest.mark.asyncio
    async def test_insert_stores_owner_as_object_id(self, repo, device_collection):
        device_collection.insert_one.return_value = MagicMock(inserted_id=DEVICE_OID)
        device_collection.find_one.return_value = _document()
        device = Device(
            id=None,
            owner_id=str(OWNER_OID),
            title="Bluetti AC180",
            manufacturer="Bluetti",
            device_model="AC180",
            condition="used",
            battery_capacity=1152,
            weight=16,
            type_c=1,
            type_a=4,
            sockets=2,
            remote_use="app",
            dimensions=Dimensions(length="31", width="20", height="24"),
            battery_type="LiFePO4",
            signal_shape="pure sine wave",
            price=300,
            min_rent_term=1,
            max_rent_term=14,
            policy_agreement=True,
            images=[DeviceImage(url="https://img/1.jpg", width=100, height=80)],
        )

        saved = await repo.insert(device)

        stored = device_collection.insert_one.await_args.args[0]
        assert stored["ownerId"] == OWNER_OID
        assert stored["isInRent"] is False
        assert "_id" not in stored
        assert "description" not in stored
        assert stored["images"] == [{"url": "https://img/1.jpg", "width": 100, "height": 80}]
        assert saved.id == str(DEVICE_OID)

    @pytest.mark.asyncio
    async def test_update_filters_by_owner(self, repo, device_collection):
        device_collection.find_one_and_update.return_value = _document(price=350)

        device = await repo.update_by_id(str(DEVICE_OID), {"price": 350, "ownerId": "x"}, owner_id=str(OWNER_OID))

        assert device.price == 350
        query, update = device_collection.find_one_and_update.await_args.args
        assert query == {"_id": DEVICE_OID, "ownerId": OWNER_OID}
        assert update == {"$set": {"price": 350}}

    @pytest.mark.asyncio
    async def test_update_no_match_returns_none(self, repo, device_collection):
        device_collection.find_one_and_update.return_value = None
        assert await repo.update_by_id(str(DEVICE_OID), {"price": 1}) is None

    @pytest.mark.asyncio
    async def test_delete(self, repo, device_collection):
        device_collection.delete_one.return_value = MagicMock(deleted_count=1)

        assert await repo.delete_by_id(str(DEVICE_OID)) is True
        device_collection.delete_one.assert_awaited_once_with({"_id": DEVICE_OID})

    @pytest.mark.asyncio
    async def test_delete_malformed_id(self, repo, device_collection):
        assert await repo.delete_by_id("bad") is False
        device_collection.delete_one.assert_not_awaited()
