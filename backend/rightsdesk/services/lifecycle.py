"""
Lifecycle Transitions

Status state machines for broadcasters, rights packages and rights grants.
Every status change passes through check_transition at the mutation boundary.
"""
from typing import Any, Dict, FrozenSet, Optional

from rightsdesk.exceptions import InvalidTransitionError
from rightsdesk.schemas.common import BroadcasterStatus, PackageStatus, RightsStatus


BROADCASTER_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    BroadcasterStatus.PENDING.value: frozenset({BroadcasterStatus.ACTIVE.value, BroadcasterStatus.SUSPENDED.value}),
    BroadcasterStatus.ACTIVE.value: frozenset({BroadcasterStatus.SUSPENDED.value}),
    BroadcasterStatus.SUSPENDED.value: frozenset({BroadcasterStatus.ACTIVE.value}),
}

PACKAGE_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    PackageStatus.DRAFT.value: frozenset({PackageStatus.ACTIVE.value}),
    PackageStatus.ACTIVE.value: frozenset({PackageStatus.EXPIRED.value}),
    PackageStatus.EXPIRED.value: frozenset(),
}

RIGHTS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    RightsStatus.DRAFT.value: frozenset({RightsStatus.ACTIVE.value, RightsStatus.REVOKED.value}),
    RightsStatus.ACTIVE.value: frozenset({RightsStatus.EXPIRED.value, RightsStatus.REVOKED.value}),
    RightsStatus.EXPIRED.value: frozenset(),
    RightsStatus.REVOKED.value: frozenset(),
}

TRANSITION_TABLES = {
    "broadcaster": BROADCASTER_TRANSITIONS,
    "rights_package": PACKAGE_TRANSITIONS,
    "rights_event": RIGHTS_TRANSITIONS,
}

# States a record may be created in
INITIAL_STATES = {
    "broadcaster": frozenset({BroadcasterStatus.PENDING.value, BroadcasterStatus.ACTIVE.value}),
    "rights_package": frozenset({PackageStatus.DRAFT.value, PackageStatus.ACTIVE.value}),
    "rights_event": frozenset({RightsStatus.DRAFT.value, RightsStatus.ACTIVE.value}),
}


def can_transition(entity: str, current: str, target: str) -> bool:
    """Whether entity may move from current to target status"""
    return target in TRANSITION_TABLES[entity].get(current, frozenset())


def check_transition(entity: str, current: str, target: str, entity_id: Optional[Any] = None) -> None:
    """Raise InvalidTransitionError unless current -> target is allowed"""
    if not can_transition(entity, current, target):
        raise InvalidTransitionError(entity, current, target, entity_id)


def check_initial_state(entity: str, status: str, entity_id: Optional[Any] = None) -> None:
    """Raise InvalidTransitionError when a record would be created in a non-initial state"""
    if status not in INITIAL_STATES[entity]:
        raise InvalidTransitionError(entity, "new", status, entity_id)
