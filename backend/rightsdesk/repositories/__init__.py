"""
Repositories Package

Read-side store interfaces used by the conflict detector and the
suggestion ranker, with SQLAlchemy implementations.
"""
from rightsdesk.repositories.rights_repository import (
    ExclusiveGrant,
    RightsRepository,
    SqlRightsRepository,
)
from rightsdesk.repositories.package_repository import (
    PackageCandidate,
    PackageRepository,
    SqlPackageRepository,
)

__all__ = [
    "ExclusiveGrant",
    "RightsRepository",
    "SqlRightsRepository",
    "PackageCandidate",
    "PackageRepository",
    "SqlPackageRepository",
]
