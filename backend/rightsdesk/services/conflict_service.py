"""
Conflict Detector

Finds active exclusive grants whose allowed territories overlap a
candidate grant. Results are advisory: callers decide whether to proceed.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union
from uuid import UUID

from rightsdesk.repositories.rights_repository import RightsRepository
from rightsdesk.schemas.common import Exclusivity
from rightsdesk.services.territory_service import normalize_codes

logger = logging.getLogger(__name__)


@dataclass
class Conflict:
    """Existing exclusive grant overlapping the candidate"""
    right_id: UUID
    event_id: UUID
    event_title: str
    broadcaster_id: UUID
    broadcaster_name: str
    territories: List[str] = field(default_factory=list)


class ConflictDetector:
    """
    Exclusivity conflict detection over a RightsRepository.

    Only allow lists take part in the overlap: a block on one grant is
    local to that grant and does not release another grant's claim.
    """

    def __init__(self, repository: RightsRepository):
        self.repository = repository

    def find_conflicts(
        self,
        event_ids: Sequence[UUID],
        territories: Sequence[str],
        exclusivity: Union[Exclusivity, str],
        exclude_broadcaster_id: Optional[UUID] = None,
        exclude_right_id: Optional[UUID] = None,
    ) -> List[Conflict]:
        """
        Find conflicts for a candidate grant.

        Args:
            event_ids: Events the candidate covers
            territories: Candidate allowed territories
            exclusivity: Candidate exclusivity; only 'exclusive' can conflict
            exclude_broadcaster_id: Broadcaster being assigned
            exclude_right_id: Grant being edited

        Returns:
            One Conflict per overlapping grant, in repository order
        """
        if Exclusivity(exclusivity) != Exclusivity.EXCLUSIVE:
            return []

        candidate = set(normalize_codes(territories))
        if not event_ids or not candidate:
            return []

        conflicts: List[Conflict] = []
        for grant in self.repository.find_active_exclusive_grants(list(dict.fromkeys(event_ids))):
            if exclude_broadcaster_id is not None and grant.broadcaster_id == exclude_broadcaster_id:
                continue
            if exclude_right_id is not None and grant.right_id == exclude_right_id:
                continue

            overlap = [code for code in grant.territories_allowed if code in candidate]
            if overlap:
                conflicts.append(Conflict(
                    right_id=grant.right_id,
                    event_id=grant.event_id,
                    event_title=grant.event_title,
                    broadcaster_id=grant.broadcaster_id,
                    broadcaster_name=grant.broadcaster_name,
                    territories=overlap,
                ))

        if conflicts:
            logger.info(
                f"{len(conflicts)} exclusivity conflict(s) across {len(event_ids)} event(s) "
                f"for territories {sorted(candidate)}"
            )
        return conflicts
