"""
Rights Repository

Filtered reads over rights grants, joined with event titles and
broadcaster names at read time.
"""
from dataclasses import dataclass, field
from typing import List, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rightsdesk.models import RightsEvent, Event, Broadcaster
from rightsdesk.schemas.common import Exclusivity, RightsStatus


@dataclass
class ExclusiveGrant:
    """Active exclusive grant as seen by the conflict detector"""
    right_id: UUID
    event_id: UUID
    event_title: str
    broadcaster_id: UUID
    broadcaster_name: str
    territories_allowed: List[str] = field(default_factory=list)


class RightsRepository:
    """Interface/base class for rights grant reads."""

    def find_active_exclusive_grants(self, event_ids: Sequence[UUID]) -> List[ExclusiveGrant]:
        raise NotImplementedError


class SqlRightsRepository(RightsRepository):
    """RightsRepository backed by the rights_events table"""

    def __init__(self, db: Session):
        self.db = db

    def find_active_exclusive_grants(self, event_ids: Sequence[UUID]) -> List[ExclusiveGrant]:
        query = (
            select(RightsEvent, Event, Broadcaster)
            .join(Event, RightsEvent.event_id == Event.id)
            .join(Broadcaster, RightsEvent.broadcaster_id == Broadcaster.id)
            .where(
                RightsEvent.event_id.in_(list(event_ids)),
                RightsEvent.exclusivity == Exclusivity.EXCLUSIVE.value,
                RightsEvent.status == RightsStatus.ACTIVE.value,
            )
            .order_by(Event.event_date, Broadcaster.name)
        )

        grants = []
        for right, event, broadcaster in self.db.execute(query).all():
            grants.append(ExclusiveGrant(
                right_id=right.id,
                event_id=right.event_id,
                event_title=event.display_title,
                broadcaster_id=right.broadcaster_id,
                broadcaster_name=broadcaster.name,
                territories_allowed=list(right.territories_allowed or []),
            ))
        return grants
