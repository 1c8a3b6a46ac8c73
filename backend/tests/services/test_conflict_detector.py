"""
Conflict Detector Tests

Exclusivity overlap over an in-memory rights repository.
"""
import pytest
from uuid import uuid4

from rightsdesk.exceptions import ValidationError
from rightsdesk.repositories.rights_repository import ExclusiveGrant, RightsRepository
from rightsdesk.schemas.common import Exclusivity
from rightsdesk.services.conflict_service import ConflictDetector


class FakeRightsRepository(RightsRepository):
    """Returns the stored grants for the requested events and counts calls"""

    def __init__(self, grants=None):
        self.grants = list(grants or [])
        self.calls = 0

    def find_active_exclusive_grants(self, event_ids):
        self.calls += 1
        return [g for g in self.grants if g.event_id in set(event_ids)]


def make_grant(event_id, broadcaster_id, territories, name="Canal+", right_id=None):
    return ExclusiveGrant(
        right_id=right_id or uuid4(),
        event_id=event_id,
        event_title="PSG vs Marseille",
        broadcaster_id=broadcaster_id,
        broadcaster_name=name,
        territories_allowed=list(territories),
    )


class TestFindConflicts:
    """Tests for ConflictDetector.find_conflicts"""

    def test_overlap_reports_shared_territories(self):
        """Should report one conflict with BE for FR/BE vs BE/DE."""
        event_id, b1, b2 = uuid4(), uuid4(), uuid4()
        existing = make_grant(event_id, b1, ["FR", "BE"])
        detector = ConflictDetector(FakeRightsRepository([existing]))

        conflicts = detector.find_conflicts(
            [event_id], ["BE", "DE"], Exclusivity.EXCLUSIVE, exclude_broadcaster_id=b2
        )

        assert len(conflicts) == 1
        assert conflicts[0].broadcaster_id == b1
        assert conflicts[0].right_id == existing.right_id
        assert conflicts[0].territories == ["BE"]
        assert conflicts[0].event_title == "PSG vs Marseille"

    def test_overlap_is_symmetric(self):
        """Should detect the overlap from either grant's point of view."""
        event_id, b1, b2 = uuid4(), uuid4(), uuid4()
        g1 = make_grant(event_id, b1, ["FR", "BE"], name="Canal+")
        g2 = make_grant(event_id, b2, ["BE", "DE"], name="beIN Sports")
        detector = ConflictDetector(FakeRightsRepository([g1, g2]))

        from_b1 = detector.find_conflicts(
            [event_id], g1.territories_allowed, Exclusivity.EXCLUSIVE,
            exclude_broadcaster_id=b1, exclude_right_id=g1.right_id,
        )
        from_b2 = detector.find_conflicts(
            [event_id], g2.territories_allowed, Exclusivity.EXCLUSIVE,
            exclude_broadcaster_id=b2, exclude_right_id=g2.right_id,
        )

        assert [c.right_id for c in from_b1] == [g2.right_id]
        assert [c.right_id for c in from_b2] == [g1.right_id]
        assert from_b1[0].territories == from_b2[0].territories == ["BE"]

    @pytest.mark.parametrize("exclusivity", [Exclusivity.SHARED, Exclusivity.NON_EXCLUSIVE, "shared"])
    def test_non_exclusive_candidate_never_conflicts(self, exclusivity):
        """Should return nothing for shared/non_exclusive candidates, even on full overlap."""
        event_id = uuid4()
        repository = FakeRightsRepository([make_grant(event_id, uuid4(), ["FR"])])
        detector = ConflictDetector(repository)

        assert detector.find_conflicts([event_id], ["FR"], exclusivity) == []
        assert repository.calls == 0

    def test_excluded_broadcaster_is_skipped(self):
        """Should ignore grants of the broadcaster being assigned."""
        event_id, b1 = uuid4(), uuid4()
        detector = ConflictDetector(FakeRightsRepository([make_grant(event_id, b1, ["FR"])]))

        assert detector.find_conflicts([event_id], ["FR"], "exclusive", exclude_broadcaster_id=b1) == []

    def test_excluded_right_is_skipped(self):
        """Should ignore the grant being edited."""
        event_id = uuid4()
        grant = make_grant(event_id, uuid4(), ["FR"])
        detector = ConflictDetector(FakeRightsRepository([grant]))

        assert detector.find_conflicts([event_id], ["FR"], "exclusive", exclude_right_id=grant.right_id) == []

    def test_disjoint_territories(self):
        """Should not report grants whose territories do not intersect."""
        event_id = uuid4()
        detector = ConflictDetector(FakeRightsRepository([make_grant(event_id, uuid4(), ["FR", "BE"])]))

        assert detector.find_conflicts([event_id], ["US", "CA"], "exclusive") == []

    def test_empty_inputs_skip_repository(self):
        """Should return immediately without querying for empty events or territories."""
        repository = FakeRightsRepository([make_grant(uuid4(), uuid4(), ["FR"])])
        detector = ConflictDetector(repository)

        assert detector.find_conflicts([], ["FR"], "exclusive") == []
        assert detector.find_conflicts([uuid4()], [], "exclusive") == []
        assert repository.calls == 0

    def test_territory_codes_are_normalized(self):
        """Should match lower-case and padded candidate codes."""
        event_id = uuid4()
        detector = ConflictDetector(FakeRightsRepository([make_grant(event_id, uuid4(), ["FR", "BE"])]))

        conflicts = detector.find_conflicts([event_id], [" be ", "fr"], "exclusive")

        assert conflicts[0].territories == ["FR", "BE"]

    def test_malformed_territory_code(self):
        """Should reject codes that are not two letters."""
        detector = ConflictDetector(FakeRightsRepository())

        with pytest.raises(ValidationError):
            detector.find_conflicts([uuid4()], ["FRA"], "exclusive")

    def test_multiple_events(self):
        """Should report one conflict per overlapping grant across events."""
        e1, e2, e3 = uuid4(), uuid4(), uuid4()
        repository = FakeRightsRepository([
            make_grant(e1, uuid4(), ["FR"]),
            make_grant(e2, uuid4(), ["DE"]),
            make_grant(e3, uuid4(), ["FR", "DE"]),
        ])
        detector = ConflictDetector(repository)

        conflicts = detector.find_conflicts([e1, e2, e1], ["FR"], "exclusive")

        assert [c.event_id for c in conflicts] == [e1]
