"""
Territory Service

Territory catalog reads, code normalization and validation.
"""
import logging
import re
from typing import Dict, Iterable, List, Set

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from rightsdesk.exceptions import ValidationError
from rightsdesk.models import Territory

logger = logging.getLogger(__name__)

TERRITORY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")
DEFAULT_REGION = "Other"

DEFAULT_TERRITORIES = [
    # (code, name, region)
    ("FR", "France", "Europe"),
    ("BE", "Belgium", "Europe"),
    ("CH", "Switzerland", "Europe"),
    ("LU", "Luxembourg", "Europe"),
    ("MC", "Monaco", "Europe"),
    ("DE", "Germany", "Europe"),
    ("ES", "Spain", "Europe"),
    ("IT", "Italy", "Europe"),
    ("PT", "Portugal", "Europe"),
    ("GB", "United Kingdom", "Europe"),
    ("NL", "Netherlands", "Europe"),
    ("US", "United States", "Americas"),
    ("CA", "Canada", "Americas"),
    ("BR", "Brazil", "Americas"),
    ("MX", "Mexico", "Americas"),
    ("MA", "Morocco", "Africa"),
    ("DZ", "Algeria", "Africa"),
    ("TN", "Tunisia", "Africa"),
    ("SN", "Senegal", "Africa"),
    ("CI", "Ivory Coast", "Africa"),
    ("NG", "Nigeria", "Africa"),
    ("AE", "United Arab Emirates", "Middle East"),
    ("QA", "Qatar", "Middle East"),
    ("SA", "Saudi Arabia", "Middle East"),
    ("JP", "Japan", "Asia"),
    ("CN", "China", "Asia"),
    ("IN", "India", "Asia"),
    ("AU", "Australia", "Oceania"),
]


def normalize_codes(codes: Iterable[str]) -> List[str]:
    """
    Upper-case, strip and de-duplicate territory codes (order preserved).

    Raises:
        ValidationError: a code is not ISO 3166-1 alpha-2 shaped
    """
    normalized: List[str] = []
    for raw in codes:
        code = (raw or "").strip().upper()
        if not TERRITORY_CODE_PATTERN.match(code):
            raise ValidationError(
                f"Invalid territory code '{raw}'. Expected ISO 3166-1 alpha-2 (e.g., FR, US, DE)"
            )
        if code not in normalized:
            normalized.append(code)
    return normalized


class TerritoryService:
    """Service class for the territory catalog"""

    def __init__(self, db: Session):
        self.db = db

    def list_territories(self) -> List[Territory]:
        """All territories ordered by name"""
        return list(self.db.execute(select(Territory).order_by(Territory.name)).scalars().all())

    def territories_by_region(self) -> Dict[str, List[Territory]]:
        """Territories grouped by region, missing regions under 'Other'"""
        grouped: Dict[str, List[Territory]] = {}
        for territory in self.list_territories():
            grouped.setdefault(territory.region or DEFAULT_REGION, []).append(territory)
        return grouped

    def known_codes(self) -> Set[str]:
        return set(self.db.execute(select(Territory.code)).scalars().all())

    def validate_codes(self, codes: Iterable[str]) -> List[str]:
        """
        Normalize codes and check each one exists in the catalog.

        Returns:
            Normalized codes
        """
        normalized = normalize_codes(codes)
        if not normalized:
            return normalized

        known = self.known_codes()
        unknown = [code for code in normalized if code not in known]
        if unknown:
            raise ValidationError(f"Unknown territory codes: {', '.join(unknown)}")
        return normalized

    def seed_defaults(self) -> int:
        """Insert the default catalog when the table is empty"""
        count = self.db.execute(select(func.count(Territory.code))).scalar() or 0
        if count:
            return 0

        for code, name, region in DEFAULT_TERRITORIES:
            self.db.add(Territory(code=code, name=name, region=region))
        self.db.commit()
        logger.info(f"Seeded {len(DEFAULT_TERRITORIES)} territories")
        return len(DEFAULT_TERRITORIES)
