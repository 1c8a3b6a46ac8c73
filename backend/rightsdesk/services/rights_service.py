"""
Rights Service

Business logic for per-event rights grants: creation with advisory
conflict preview, edits, lifecycle transitions, bulk assignment and
per-country resolution.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select, case
from sqlalchemy.orm import Session

from rightsdesk.exceptions import NotFoundError, ValidationError
from rightsdesk.models import Broadcaster, Event, RightsEvent, RightsPackage
from rightsdesk.models.types import ensure_utc, utcnow
from rightsdesk.repositories.rights_repository import SqlRightsRepository
from rightsdesk.schemas.common import (
    BroadcasterStatus,
    Exclusivity,
    RightsStatus,
)
from rightsdesk.schemas.rights import (
    BulkRightsCreate,
    RightsEventCreate,
    RightsEventUpdate,
)
from rightsdesk.services.broadcaster_service import BroadcasterService
from rightsdesk.services.conflict_service import Conflict, ConflictDetector
from rightsdesk.services.lifecycle import check_initial_state, check_transition
from rightsdesk.services.package_service import PackageService
from rightsdesk.services.territory_service import TerritoryService, normalize_codes

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = {RightsStatus.DRAFT.value, RightsStatus.ACTIVE.value}


def covers_territory(allowed: Sequence[str], blocked: Sequence[str], code: str) -> bool:
    """
    Whether a grant applies in a territory.

    Blocked always wins; an empty allow list means worldwide.
    """
    if code in blocked:
        return False
    if not allowed:
        return True
    return code in allowed


def effective_territories(
    allowed: Sequence[str],
    blocked: Sequence[str],
    catalog: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Allowed minus blocked.

    An empty allow list expands to the catalog (worldwide) when one is given.
    """
    blocked_set = set(blocked)
    base = list(allowed) if allowed else sorted(catalog or [])
    return [code for code in base if code not in blocked_set]


@dataclass
class BulkAssignResult:
    """Outcome of a bulk assignment"""
    created: List[RightsEvent] = field(default_factory=list)
    skipped_event_ids: List[UUID] = field(default_factory=list)
    conflicts: List[Conflict] = field(default_factory=list)


@dataclass
class ResolvedGrant:
    """Active grant covering a country, with replay availability computed"""
    right: RightsEvent
    broadcaster: Broadcaster
    replay_until: Optional[datetime]


class RightsService:
    """Service class for Rights grant operations"""

    def __init__(self, db: Session):
        self.db = db
        self.territories = TerritoryService(db)
        self.broadcasters = BroadcasterService(db)
        self.packages = PackageService(db)
        self.detector = ConflictDetector(SqlRightsRepository(db))

    # ============== Reads ==============

    def list_rights(
        self,
        event_id: Optional[UUID] = None,
        broadcaster_id: Optional[UUID] = None,
        status: Optional[RightsStatus] = None,
        exclusivity: Optional[Exclusivity] = None,
    ) -> List[RightsEvent]:
        """Get grants with optional filters, newest first"""
        query = select(RightsEvent)

        if event_id:
            query = query.where(RightsEvent.event_id == event_id)

        if broadcaster_id:
            query = query.where(RightsEvent.broadcaster_id == broadcaster_id)

        if status:
            query = query.where(RightsEvent.status == status.value)

        if exclusivity:
            query = query.where(RightsEvent.exclusivity == exclusivity.value)

        query = query.order_by(RightsEvent.created_at.desc())
        return list(self.db.execute(query).scalars().all())

    def get_right(self, right_id: UUID) -> Optional[RightsEvent]:
        """Get a single grant by ID"""
        return self.db.get(RightsEvent, right_id)

    def require_right(self, right_id: UUID) -> RightsEvent:
        right = self.get_right(right_id)
        if not right:
            raise NotFoundError("Rights grant", right_id)
        return right

    def require_event(self, event_id: UUID) -> Event:
        event = self.db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    def find_conflicts(
        self,
        event_ids: Sequence[UUID],
        territories: Sequence[str],
        exclusivity: Exclusivity,
        exclude_broadcaster_id: Optional[UUID] = None,
        exclude_right_id: Optional[UUID] = None,
    ) -> List[Conflict]:
        """Conflict check for a candidate grant (read-only)"""
        return self.detector.find_conflicts(
            event_ids,
            territories,
            exclusivity,
            exclude_broadcaster_id=exclude_broadcaster_id,
            exclude_right_id=exclude_right_id,
        )

    # ============== Writes ==============

    def _resolve_package(self, package_id: Optional[UUID], broadcaster_id: UUID) -> Optional[RightsPackage]:
        if package_id is None:
            return None
        package = self.packages.require_package(package_id)
        if package.broadcaster_id != broadcaster_id:
            raise ValidationError("Package belongs to another broadcaster", package_id)
        return package

    def _territory_lists(
        self,
        allowed: Sequence[str],
        blocked: Sequence[str],
    ) -> Tuple[List[str], List[str]]:
        return self.territories.validate_codes(allowed), self.territories.validate_codes(blocked)

    def create_right(
        self,
        data: RightsEventCreate,
        actor_id: Optional[UUID] = None,
    ) -> Tuple[RightsEvent, List[Conflict]]:
        """
        Create a grant and report the exclusive grants it overlaps.

        Conflicts are returned alongside the created grant and never block it.
        """
        self.require_event(data.event_id)
        self.broadcasters.require_broadcaster(data.broadcaster_id)
        package = self._resolve_package(data.package_id, data.broadcaster_id)
        check_initial_state("rights_event", data.status.value)

        exclusivity = data.exclusivity
        if exclusivity is None:
            exclusivity = (
                Exclusivity.EXCLUSIVE
                if package is not None and package.is_exclusive_default
                else Exclusivity.NON_EXCLUSIVE
            )

        allowed_input = data.territories_allowed
        if allowed_input is None:
            allowed_input = list(package.territories_default or []) if package is not None else []
        allowed, blocked = self._territory_lists(allowed_input, data.territories_blocked)

        right = RightsEvent(
            event_id=data.event_id,
            broadcaster_id=data.broadcaster_id,
            package_id=data.package_id,
            rights_live=data.rights_live,
            rights_replay=data.rights_replay,
            rights_highlights=data.rights_highlights,
            replay_window_hours=data.replay_window_hours if data.rights_replay else None,
            territories_allowed=allowed,
            territories_blocked=blocked,
            exclusivity=exclusivity.value,
            platform=data.platform.value,
            status=data.status.value,
            expires_at=data.expires_at,
        )
        self.db.add(right)
        self.db.flush()

        conflicts = self.find_conflicts(
            [right.event_id],
            allowed,
            exclusivity,
            exclude_broadcaster_id=right.broadcaster_id,
            exclude_right_id=right.id,
        )

        self.db.commit()
        self.db.refresh(right)

        logger.info(
            f"Rights {right.id} created for event {right.event_id} / broadcaster "
            f"{right.broadcaster_id} by {actor_id} ({right.exclusivity}, {len(conflicts)} conflict(s))"
        )
        return right, conflicts

    def update_right(
        self,
        right_id: UUID,
        data: RightsEventUpdate,
        actor_id: Optional[UUID] = None,
    ) -> Tuple[RightsEvent, List[Conflict]]:
        """Edit a draft or active grant and re-run the conflict preview"""
        right = self.require_right(right_id)
        if right.status not in EDITABLE_STATUSES:
            raise ValidationError(f"Rights in status '{right.status}' cannot be edited", right_id)

        changes = data.model_dump(exclude_unset=True)
        if "territories_allowed" in changes:
            changes["territories_allowed"] = self.territories.validate_codes(changes["territories_allowed"] or [])
        if "territories_blocked" in changes:
            changes["territories_blocked"] = self.territories.validate_codes(changes["territories_blocked"] or [])
        for enum_field in ("exclusivity", "platform"):
            if changes.get(enum_field) is not None:
                changes[enum_field] = changes[enum_field].value

        for field_name, value in changes.items():
            setattr(right, field_name, value)
        if not right.rights_replay:
            right.replay_window_hours = None

        conflicts = self.find_conflicts(
            [right.event_id],
            list(right.territories_allowed or []),
            Exclusivity(right.exclusivity),
            exclude_broadcaster_id=right.broadcaster_id,
            exclude_right_id=right.id,
        )

        self.db.commit()
        self.db.refresh(right)

        logger.info(f"Rights {right_id} updated by {actor_id}: {sorted(changes)}")
        return right, conflicts

    def change_status(
        self,
        right_id: UUID,
        status: RightsStatus,
        actor_id: Optional[UUID] = None,
    ) -> RightsEvent:
        """Move a grant through draft -> active -> expired/revoked"""
        right = self.require_right(right_id)
        check_transition("rights_event", right.status, status.value, right_id)

        previous = right.status
        right.status = status.value
        self.db.commit()
        self.db.refresh(right)

        logger.info(f"Rights {right_id} status {previous} -> {status.value} by {actor_id}")
        return right

    def revoke_right(self, right_id: UUID, actor_id: Optional[UUID] = None) -> RightsEvent:
        """Soft revoke; the row stays queryable"""
        return self.change_status(right_id, RightsStatus.REVOKED, actor_id)

    def delete_right(self, right_id: UUID, actor_id: Optional[UUID] = None) -> None:
        """Hard delete, drafts only"""
        right = self.require_right(right_id)
        if right.status != RightsStatus.DRAFT.value:
            raise ValidationError("Only draft rights can be deleted; revoke it instead", right_id)

        self.db.delete(right)
        self.db.commit()
        logger.info(f"Draft rights {right_id} deleted by {actor_id}")

    def bulk_assign(self, data: BulkRightsCreate, actor_id: Optional[UUID] = None) -> BulkAssignResult:
        """
        Grant one broadcaster the same rights on many events.

        Conflicts are computed up front; skip_conflicts decides whether the
        conflicting events are left out or created anyway.
        """
        self.broadcasters.require_broadcaster(data.broadcaster_id)
        package = self._resolve_package(data.package_id, data.broadcaster_id)
        check_initial_state("rights_event", data.status.value)
        allowed = self.territories.validate_codes(data.territories_allowed)

        event_ids = list(dict.fromkeys(data.event_ids))
        for event_id in event_ids:
            self.require_event(event_id)

        result = BulkAssignResult()
        result.conflicts = self.find_conflicts(
            event_ids,
            allowed,
            data.exclusivity,
            exclude_broadcaster_id=data.broadcaster_id,
        )
        conflicting = {conflict.event_id for conflict in result.conflicts}

        for event_id in event_ids:
            if data.skip_conflicts and event_id in conflicting:
                result.skipped_event_ids.append(event_id)
                continue

            right = RightsEvent(
                event_id=event_id,
                broadcaster_id=data.broadcaster_id,
                package_id=package.id if package is not None else None,
                rights_live=data.rights_live,
                rights_replay=data.rights_replay,
                rights_highlights=data.rights_highlights,
                replay_window_hours=data.replay_window_hours if data.rights_replay else None,
                territories_allowed=allowed,
                territories_blocked=[],
                exclusivity=data.exclusivity.value,
                platform=data.platform.value,
                status=data.status.value,
            )
            self.db.add(right)
            result.created.append(right)

        self.db.commit()
        for right in result.created:
            self.db.refresh(right)

        logger.info(
            f"Bulk rights for broadcaster {data.broadcaster_id} by {actor_id}: "
            f"created={len(result.created)} skipped={len(result.skipped_event_ids)}"
        )
        return result

    # ============== Resolution ==============

    def resolve(
        self,
        event_id: UUID,
        country: str,
        now: Optional[datetime] = None,
    ) -> Tuple[Event, List[ResolvedGrant]]:
        """
        Active, unexpired grants of active broadcasters covering a country.

        Exclusive grants come first, then oldest grant first.
        """
        code = normalize_codes([country])[0]
        event = self.require_event(event_id)
        if event.status != "published":
            raise NotFoundError("Published event", event_id)

        now = ensure_utc(now) if now else utcnow()

        query = (
            select(RightsEvent, Broadcaster)
            .join(Broadcaster, RightsEvent.broadcaster_id == Broadcaster.id)
            .where(
                RightsEvent.event_id == event_id,
                RightsEvent.status == RightsStatus.ACTIVE.value,
                Broadcaster.status == BroadcasterStatus.ACTIVE.value,
            )
            .order_by(
                case((RightsEvent.exclusivity == Exclusivity.EXCLUSIVE.value, 0), else_=1),
                RightsEvent.created_at,
            )
        )

        resolved: List[ResolvedGrant] = []
        for right, broadcaster in self.db.execute(query).all():
            if not covers_territory(right.territories_allowed or [], right.territories_blocked or [], code):
                continue
            if right.expires_at and ensure_utc(right.expires_at) < now:
                continue

            replay_until = None
            if right.rights_replay and right.replay_window_hours:
                replay_end = ensure_utc(event.event_date) + timedelta(hours=right.replay_window_hours)
                replay_until = replay_end if replay_end > now else None

            resolved.append(ResolvedGrant(right=right, broadcaster=broadcaster, replay_until=replay_until))

        return event, resolved
