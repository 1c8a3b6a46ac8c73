"""
Broadcaster Suggestion Ranker

Suggests broadcasters for an event from the active packages whose scope
matches it, most specific scope first.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Set
from uuid import UUID

from rightsdesk.models.types import ensure_utc
from rightsdesk.repositories.package_repository import PackageCandidate, PackageRepository
from rightsdesk.schemas.common import BroadcasterStatus, ScopeType, SCOPE_PRIORITY


@dataclass
class Suggestion:
    """Broadcaster matched through one package"""
    broadcaster_id: UUID
    broadcaster_name: str
    broadcaster_logo_url: Optional[str]
    broadcaster_status: str
    match_type: ScopeType
    priority: int
    package_id: UUID
    package_name: str


def package_matches(
    candidate: PackageCandidate,
    sport_id: Optional[UUID],
    league_id: Optional[UUID],
) -> bool:
    """Season and competition packages match on league, sport packages on sport"""
    scope = ScopeType(candidate.scope_type)
    if scope in (ScopeType.SEASON, ScopeType.COMPETITION):
        return league_id is not None and candidate.league_id == league_id
    return sport_id is not None and candidate.sport_id == sport_id


class SuggestionRanker:
    """Ranks broadcaster suggestions over a PackageRepository"""

    def __init__(self, repository: PackageRepository):
        self.repository = repository

    def suggest_broadcasters(
        self,
        sport_id: Optional[UUID],
        league_id: Optional[UUID],
        event_date: datetime,
    ) -> List[Suggestion]:
        """
        Suggest broadcasters for an event.

        Packages are walked in (priority, package name, package id) order and
        each broadcaster is kept only for its first match, so a broadcaster
        holding both a season and a sport package appears once as 'season'.
        """
        if sport_id is None and league_id is None:
            return []

        # Stored windows are compared in UTC
        event_date = ensure_utc(event_date).astimezone(timezone.utc)
        matching = [
            candidate
            for candidate in self.repository.find_active_packages_on(event_date)
            if candidate.broadcaster_status == BroadcasterStatus.ACTIVE.value
            and package_matches(candidate, sport_id, league_id)
        ]
        matching.sort(key=lambda c: (
            SCOPE_PRIORITY[ScopeType(c.scope_type)],
            c.package_name,
            str(c.package_id),
        ))

        suggestions: List[Suggestion] = []
        seen: Set[UUID] = set()
        for candidate in matching:
            if candidate.broadcaster_id in seen:
                continue
            seen.add(candidate.broadcaster_id)

            scope = ScopeType(candidate.scope_type)
            suggestions.append(Suggestion(
                broadcaster_id=candidate.broadcaster_id,
                broadcaster_name=candidate.broadcaster_name,
                broadcaster_logo_url=candidate.broadcaster_logo_url,
                broadcaster_status=candidate.broadcaster_status,
                match_type=scope,
                priority=SCOPE_PRIORITY[scope],
                package_id=candidate.package_id,
                package_name=candidate.package_name,
            ))

        return suggestions
