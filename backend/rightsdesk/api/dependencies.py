"""
API Dependencies

Current actor lookup and role gates. Identity is established upstream;
this service only reads the forwarded user id and role headers.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from rightsdesk.exceptions import AuthorizationError
from rightsdesk.schemas.common import AdminRole, ROLE_RANK

logger = logging.getLogger(__name__)


@dataclass
class Actor:
    """Authenticated console user"""
    user_id: UUID
    role: AdminRole

    def has_role(self, minimum: AdminRole) -> bool:
        return ROLE_RANK[self.role] >= ROLE_RANK[minimum]


def get_current_actor(
    x_admin_user_id: Optional[str] = Header(None),
    x_admin_role: Optional[str] = Header(None),
) -> Actor:
    """
    Build the actor from X-Admin-User-Id / X-Admin-Role.

    Raises HTTPException 401 when either header is missing or malformed.
    """
    if not x_admin_user_id or not x_admin_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        user_id = UUID(x_admin_user_id)
        role = AdminRole(x_admin_role.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid identity headers",
        )

    return Actor(user_id=user_id, role=role)


def require_role(minimum: AdminRole):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.post("/{event_id}/override")
        def override(actor: Actor = Depends(require_role(AdminRole.ADMIN))):
            ...
    """
    def role_checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if not actor.has_role(minimum):
            logger.warning(f"Actor {actor.user_id} ({actor.role.value}) denied, requires {minimum.value}")
            raise AuthorizationError(minimum.value, actor.role.value)
        return actor
    return role_checker


def split_csv(values: Optional[List[str]]) -> List[str]:
    """Accept repeated and comma-separated query values alike"""
    result: List[str] = []
    for value in values or []:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


def parse_uuid_list(values: Optional[List[str]], name: str) -> List[UUID]:
    try:
        return [UUID(value) for value in split_csv(values)]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{name} must contain UUIDs",
        )
