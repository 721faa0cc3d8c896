"""
Ownership policy shared by the post and comment services
"""

import logging
from typing import Any, Mapping

from utils.errors import ForbiddenError

logger = logging.getLogger(__name__)


def is_owner(principal: Any, resource: Mapping[str, Any]) -> bool:
    """
    Check whether the principal created the resource

    Ids are compared as strings since the token subject and the stored
    creator id can come from different representations.
    """
    principal_id = getattr(principal, "id", None)
    created_by = resource.get("created_by") if resource else None
    if principal_id is None or created_by is None:
        return False
    return str(principal_id) == str(created_by)


def ensure_owner(principal: Any, resource: Mapping[str, Any], resource_name: str) -> None:
    """Raise ForbiddenError unless the principal owns the resource"""
    if not is_owner(principal, resource):
        logger.warning(
            f"Principal {getattr(principal, 'id', None)} denied on {resource_name} {resource.get('id')}"
        )
        raise ForbiddenError("You are not allowed to perform this action")
