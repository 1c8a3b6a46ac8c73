"""
Broadcaster Service

Business logic for Broadcaster operations.
"""
import logging
from typing import Optional, List
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import Session

from rightsdesk.exceptions import NotFoundError
from rightsdesk.models import Broadcaster
from rightsdesk.schemas.broadcaster import BroadcasterCreate, BroadcasterUpdate
from rightsdesk.schemas.common import BroadcasterStatus
from rightsdesk.services.lifecycle import check_initial_state, check_transition

logger = logging.getLogger(__name__)


class BroadcasterService:
    """Service class for Broadcaster operations"""

    def __init__(self, db: Session):
        self.db = db

    def list_broadcasters(
        self,
        status: Optional[BroadcasterStatus] = None,
        search: Optional[str] = None,
    ) -> List[Broadcaster]:
        """Get broadcasters ordered by name"""
        query = select(Broadcaster)

        if status:
            query = query.where(Broadcaster.status == status.value)

        if search:
            query = query.where(Broadcaster.name.ilike(f"%{search}%"))

        return list(self.db.execute(query.order_by(Broadcaster.name)).scalars().all())

    def get_broadcaster(self, broadcaster_id: UUID) -> Optional[Broadcaster]:
        """Get a single broadcaster by ID"""
        return self.db.get(Broadcaster, broadcaster_id)

    def require_broadcaster(self, broadcaster_id: UUID) -> Broadcaster:
        broadcaster = self.get_broadcaster(broadcaster_id)
        if not broadcaster:
            raise NotFoundError("Broadcaster", broadcaster_id)
        return broadcaster

    def create_broadcaster(self, data: BroadcasterCreate, actor_id: Optional[UUID] = None) -> Broadcaster:
        """Create a broadcaster (pending or active)"""
        check_initial_state("broadcaster", data.status.value)

        broadcaster = Broadcaster(
            name=data.name,
            legal_name=data.legal_name,
            logo_url=data.logo_url,
            contact_email=data.contact_email,
            status=data.status.value,
        )
        self.db.add(broadcaster)
        self.db.commit()
        self.db.refresh(broadcaster)

        logger.info(f"Broadcaster {broadcaster.id} created by {actor_id} (status={broadcaster.status})")
        return broadcaster

    def update_broadcaster(
        self,
        broadcaster_id: UUID,
        data: BroadcasterUpdate,
        actor_id: Optional[UUID] = None,
    ) -> Broadcaster:
        """Update descriptive fields"""
        broadcaster = self.require_broadcaster(broadcaster_id)

        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(broadcaster, field_name, value)

        self.db.commit()
        self.db.refresh(broadcaster)

        logger.info(f"Broadcaster {broadcaster_id} updated by {actor_id}")
        return broadcaster

    def change_status(
        self,
        broadcaster_id: UUID,
        status: BroadcasterStatus,
        actor_id: Optional[UUID] = None,
    ) -> Broadcaster:
        """
        Move a broadcaster through its lifecycle.

        Existing rights are left untouched; suspended broadcasters only
        stop appearing in suggestions and rights resolution.
        """
        broadcaster = self.require_broadcaster(broadcaster_id)
        check_transition("broadcaster", broadcaster.status, status.value, broadcaster_id)

        previous = broadcaster.status
        broadcaster.status = status.value
        self.db.commit()
        self.db.refresh(broadcaster)

        logger.info(f"Broadcaster {broadcaster_id} status {previous} -> {status.value} by {actor_id}")
        return broadcaster
