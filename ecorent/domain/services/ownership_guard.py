# Standard library imports
from typing import Any, Optional

# Local application imports
from ..exceptions import ForbiddenError


def authorize(resource_owner_id: Optional[Any], caller_id: Optional[Any]) -> None:
    """
    Allow the call only when the caller owns the resource.

    Ids are compared by their string value, so an ObjectId and its hex string
    match. A missing id on either side never matches.

    Raises:
        ForbiddenError: If the caller is not the owner
    """
    if resource_owner_id is None or caller_id is None:
        raise ForbiddenError("Access denied: resource owner could not be verified")

    if str(resource_owner_id) != str(caller_id):
        raise ForbiddenError(
            "Access denied: caller does not own this resource",
            details={"owner_id": str(resource_owner_id), "caller_id": str(caller_id)},
        )
