"""
Rights Service Tests

Grant creation, lifecycle, bulk assignment and per-country resolution.
"""
import pytest
from datetime import timedelta
from uuid import uuid4

from rightsdesk.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from rightsdesk.models import RightsEvent
from rightsdesk.models.types import ensure_utc
from rightsdesk.schemas.common import Exclusivity, RightsStatus
from rightsdesk.schemas.rights import BulkRightsCreate, RightsEventCreate, RightsEventUpdate
from rightsdesk.services.rights_service import RightsService, covers_territory, effective_territories


class TestTerritoryCoverage:

    def test_blocked_wins_over_allowed(self):
        """Should exclude a code that is both allowed and blocked."""
        assert effective_territories(["FR", "BE", "CH"], ["BE"]) == ["FR", "CH"]
        assert covers_territory(["FR", "BE"], ["BE"], "BE") is False

    def test_empty_allow_list_is_worldwide(self):
        """Should expand an empty allow list to the catalog minus blocks."""
        assert effective_territories([], ["US"], ["FR", "US", "DE"]) == ["DE", "FR"]
        assert covers_territory([], ["US"], "JP") is True
        assert covers_territory([], ["US"], "US") is False


class TestCreateRight:

    def test_inherits_package_defaults(self, db_session, sample_event, sample_package, exclusive_right):
        """Should take exclusivity and territories from the package, without self-conflict."""
        service = RightsService(db_session)

        right, conflicts = service.create_right(RightsEventCreate(
            event_id=sample_event.id,
            broadcaster_id=sample_package.broadcaster_id,
            package_id=sample_package.id,
        ))

        assert right.exclusivity == "exclusive"
        assert right.territories_allowed == ["FR", "BE"]
        assert right.status == "draft"
        assert conflicts == []

    def test_reports_conflicts_without_blocking(self, db_session, sample_event, exclusive_right, other_broadcaster):
        """Should create the grant and return the overlapping exclusive grant."""
        service = RightsService(db_session)

        right, conflicts = service.create_right(RightsEventCreate(
            event_id=sample_event.id,
            broadcaster_id=other_broadcaster.id,
            territories_allowed=["be", "DE"],
            exclusivity=Exclusivity.EXCLUSIVE,
            status=RightsStatus.ACTIVE,
        ))

        assert right.id is not None
        assert right.territories_allowed == ["BE", "DE"]
        assert len(conflicts) == 1
        assert conflicts[0].right_id == exclusive_right.id
        assert conflicts[0].broadcaster_name == "Canal+"
        assert conflicts[0].territories == ["BE"]

    def test_package_of_other_broadcaster(self, db_session, sample_event, sample_package, other_broadcaster):
        """Should refuse a package that belongs to another broadcaster."""
        with pytest.raises(ValidationError):
            RightsService(db_session).create_right(RightsEventCreate(
                event_id=sample_event.id,
                broadcaster_id=other_broadcaster.id,
                package_id=sample_package.id,
            ))

    def test_unknown_references(self, db_session, sample_event, sample_broadcaster, territories):
        """Should raise NotFoundError for unknown event or broadcaster, ValidationError for unknown codes."""
        service = RightsService(db_session)

        with pytest.raises(NotFoundError):
            service.create_right(RightsEventCreate(event_id=uuid4(), broadcaster_id=sample_broadcaster.id))
        with pytest.raises(NotFoundError):
            service.create_right(RightsEventCreate(event_id=sample_event.id, broadcaster_id=uuid4()))
        with pytest.raises(ValidationError):
            service.create_right(RightsEventCreate(
                event_id=sample_event.id, broadcaster_id=sample_broadcaster.id, territories_allowed=["ZZ"],
            ))


class TestRightLifecycle:

    def test_revoke_keeps_row(self, db_session, exclusive_right):
        """Should soft-revoke an active grant."""
        service = RightsService(db_session)

        right = service.revoke_right(exclusive_right.id)

        assert right.status == "revoked"
        assert service.get_right(exclusive_right.id) is not None

    def test_revoked_cannot_be_reactivated(self, db_session, exclusive_right):
        """Should refuse transitions out of a terminal state."""
        service = RightsService(db_session)
        service.revoke_right(exclusive_right.id)

        with pytest.raises(InvalidTransitionError):
            service.change_status(exclusive_right.id, RightsStatus.ACTIVE)

    def test_delete_only_drafts(self, db_session, sample_event, sample_broadcaster, exclusive_right):
        """Should hard-delete drafts and refuse active grants."""
        service = RightsService(db_session)
        draft, _ = service.create_right(RightsEventCreate(
            event_id=sample_event.id, broadcaster_id=sample_broadcaster.id, territories_allowed=["CH"],
        ))

        service.delete_right(draft.id)
        assert service.get_right(draft.id) is None

        with pytest.raises(ValidationError):
            service.delete_right(exclusive_right.id)

    def test_update_rechecks_conflicts(self, db_session, sample_event, exclusive_right, other_broadcaster):
        """Should report conflicts when an edit makes a grant exclusive."""
        service = RightsService(db_session)
        right, conflicts = service.create_right(RightsEventCreate(
            event_id=sample_event.id,
            broadcaster_id=other_broadcaster.id,
            territories_allowed=["FR"],
            exclusivity=Exclusivity.NON_EXCLUSIVE,
        ))
        assert conflicts == []

        right, conflicts = service.update_right(right.id, RightsEventUpdate(exclusivity=Exclusivity.EXCLUSIVE))

        assert right.exclusivity == "exclusive"
        assert [c.territories for c in conflicts] == [["FR"]]


class TestBulkAssign:

    def test_skips_conflicting_events(self, db_session, sample_event, second_event, exclusive_right, other_broadcaster):
        """Should create grants only for events without conflicts."""
        result = RightsService(db_session).bulk_assign(BulkRightsCreate(
            broadcaster_id=other_broadcaster.id,
            event_ids=[sample_event.id, second_event.id],
            territories_allowed=["FR"],
            exclusivity=Exclusivity.EXCLUSIVE,
        ))

        assert [r.event_id for r in result.created] == [second_event.id]
        assert result.skipped_event_ids == [sample_event.id]
        assert len(result.conflicts) == 1

    def test_creates_all_when_not_skipping(self, db_session, sample_event, second_event, exclusive_right, other_broadcaster):
        """Should create every grant and still report conflicts."""
        result = RightsService(db_session).bulk_assign(BulkRightsCreate(
            broadcaster_id=other_broadcaster.id,
            event_ids=[sample_event.id, second_event.id],
            territories_allowed=["FR"],
            exclusivity=Exclusivity.EXCLUSIVE,
            skip_conflicts=False,
        ))

        assert len(result.created) == 2
        assert result.skipped_event_ids == []
        assert len(result.conflicts) == 1
        assert all(r.status == "active" and r.replay_window_hours == 168 for r in result.created)


class TestResolve:

    def test_authorized_country(self, db_session, sample_event, exclusive_right):
        """Should return the grant with its replay window."""
        event, grants = RightsService(db_session).resolve(sample_event.id, "fr")

        assert event.id == sample_event.id
        assert len(grants) == 1
        assert grants[0].broadcaster.name == "Canal+"
        assert grants[0].replay_until is not None
        assert grants[0].replay_until == ensure_utc(sample_event.event_date) + timedelta(hours=72)

    def test_uncovered_and_blocked_countries(self, db_session, sample_event, exclusive_right):
        """Should not resolve territories outside the allow list or blocked."""
        exclusive_right.territories_blocked = ["BE"]
        db_session.commit()
        service = RightsService(db_session)

        assert service.resolve(sample_event.id, "DE")[1] == []
        assert service.resolve(sample_event.id, "BE")[1] == []

    def test_suspended_broadcaster_and_expired_grant(self, db_session, sample_event, exclusive_right, suspended_broadcaster):
        """Should skip suspended broadcasters and grants past their expiry."""
        db_session.add(RightsEvent(
            event_id=sample_event.id,
            broadcaster_id=suspended_broadcaster.id,
            territories_allowed=[],
            territories_blocked=[],
            exclusivity="non_exclusive",
            status="active",
        ))
        exclusive_right.expires_at = sample_event.event_date - timedelta(days=30)
        db_session.commit()

        assert RightsService(db_session).resolve(sample_event.id, "FR")[1] == []

    def test_exclusive_grant_first(self, db_session, sample_event, exclusive_right, other_broadcaster):
        """Should list the exclusive grant before worldwide non-exclusive ones."""
        db_session.add(RightsEvent(
            event_id=sample_event.id,
            broadcaster_id=other_broadcaster.id,
            territories_allowed=[],
            territories_blocked=[],
            exclusivity="non_exclusive",
            status="active",
        ))
        db_session.commit()

        _, grants = RightsService(db_session).resolve(sample_event.id, "FR")

        assert [g.broadcaster.name for g in grants] == ["Canal+", "beIN Sports"]

    def test_unpublished_event(self, db_session, sample_event, exclusive_right):
        """Should treat unpublished events as not found."""
        sample_event.status = "draft"
        db_session.commit()

        with pytest.raises(NotFoundError):
            RightsService(db_session).resolve(sample_event.id, "FR")
