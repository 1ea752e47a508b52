# Standard library imports
import logging
from typing import Any, Dict, List, Tuple

# External package imports
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

# Local application imports
from ...application.dto.device_dto import (
    DeviceCreatedResponse,
    DeviceResponse,
    DeviceUpdatedResponse,
    MessageResponse,
    to_device_response,
)
from ...application.dto.user_dto import AuthenticatedUser
from ...application.services.device_lifecycle_service import DeviceLifecycleService
from ...di.container import get_container
from ...domain.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
)
from ...domain.gateways.object_storage_gateway import ImageBlob
from .dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["devices"])

IMAGES_FIELD = "images"


def _to_http_exception(exception: Exception) -> HTTPException:
    """Map a lifecycle error to the HTTP status the client sees"""
    if isinstance(exception, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exception))
    if isinstance(exception, ForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exception))
    if isinstance(exception, BadRequestError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exception))

    logger.error(f"Device request failed: {exception}", exc_info=exception)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Server error"
    )


def _get_service() -> DeviceLifecycleService:
    return get_container().get(DeviceLifecycleService)


async def _read_device_form(request: Request) -> Tuple[Dict[str, str], List[ImageBlob]]:
    """Split a multipart form into text fields and image attachments; non-images are dropped"""
    form = await request.form()
    fields: Dict[str, str] = {}
    attachments: List[ImageBlob] = []

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key != IMAGES_FIELD:
                continue
            content_type = value.content_type or ""
            if not content_type.startswith("image/"):
                logger.info(f"Dropping non-image upload {value.filename} ({content_type})")
                continue
            attachments.append(
                ImageBlob(
                    filename=value.filename or "image",
                    content_type=content_type,
                    data=await value.read(),
                )
            )
        else:
            fields[key] = value

    return fields, attachments


@router.post(
    "/addDevice",
    response_model=DeviceCreatedResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def add_device(
    request: Request,
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> DeviceCreatedResponse:
    """
    Create a device from a multipart form

    Text fields are coerced to typed values; files under "images" are uploaded
    to object storage and paired positionally with the "imageDimensions" field.
    """
    fields, attachments = await _read_device_form(request)

    try:
        device = await _get_service().create(
            raw_fields=fields,
            attachments=attachments,
            caller_id=current_user.id,
        )
    except Exception as exception:
        raise _to_http_exception(exception)

    return DeviceCreatedResponse(message="Device added.", device=to_device_response(device))


@router.get(
    "/getDevice/{device_id}",
    response_model=DeviceResponse,
    response_model_exclude_none=True,
)
async def get_device(device_id: str) -> DeviceResponse:
    """Get a device by ID with its owner's contact details"""
    try:
        device = await _get_service().get_by_id(device_id)
    except Exception as exception:
        raise _to_http_exception(exception)

    return to_device_response(device)


@router.get(
    "/getOwnerDevices",
    response_model=List[DeviceResponse],
    response_model_exclude_none=True,
)
async def get_owner_devices(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> List[DeviceResponse]:
    """List the devices owned by the current user"""
    try:
        devices = await _get_service().list_by_owner(current_user.id)
    except Exception as exception:
        raise _to_http_exception(exception)

    return [to_device_response(device) for device in devices]


@router.get(
    "/getAllDevices",
    response_model=List[DeviceResponse],
    response_model_exclude_none=True,
)
async def get_all_devices() -> List[DeviceResponse]:
    """List every device with the owner's town"""
    try:
        devices = await _get_service().list_all()
    except Exception as exception:
        raise _to_http_exception(exception)

    return [to_device_response(device) for device in devices]


@router.put(
    "/updateDevice/{device_id}",
    response_model=DeviceUpdatedResponse,
    response_model_exclude_none=True,
)
async def update_device(
    device_id: str,
    updates: Dict[str, Any] = Body(...),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> DeviceUpdatedResponse:
    """Partially update a device owned by the current user"""
    try:
        device = await _get_service().update(
            device_id=device_id,
            updates=updates,
            caller_id=current_user.id,
        )
    except Exception as exception:
        raise _to_http_exception(exception)

    return DeviceUpdatedResponse(message="Device updated.", updated_device=to_device_response(device))


@router.delete("/deleteDevice/{device_id}", response_model=MessageResponse)
async def delete_device(
    device_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
    """Delete a device owned by the current user, images included"""
    try:
        await _get_service().delete(device_id=device_id, caller_id=current_user.id)
    except Exception as exception:
        raise _to_http_exception(exception)

    return MessageResponse(message="Device deleted.")
