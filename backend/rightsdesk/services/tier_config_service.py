"""
Tier Config Service

Pricing tier bands: reads, owner edits and price-to-tier lookup.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rightsdesk.exceptions import NotFoundError, ValidationError
from rightsdesk.models import PricingTierConfig
from rightsdesk.schemas.common import PricingTier, TIER_ORDER
from rightsdesk.schemas.pricing import TierConfigUpdate

logger = logging.getLogger(__name__)

DEFAULT_TIER_BANDS = {
    # tier: (min, base, max)
    PricingTier.BRONZE: (Decimal("0.99"), Decimal("1.49"), Decimal("1.99")),
    PricingTier.SILVER: (Decimal("1.99"), Decimal("2.49"), Decimal("2.99")),
    PricingTier.GOLD: (Decimal("2.99"), Decimal("3.99"), Decimal("5.00")),
}


def check_band(min_price: Decimal, base_price: Decimal, max_price: Decimal, tier: str) -> None:
    """Raise ValidationError unless 0 < min <= base <= max"""
    if min_price <= 0:
        raise ValidationError(f"Tier '{tier}' min_price must be positive")
    if not (min_price <= base_price <= max_price):
        raise ValidationError(
            f"Tier '{tier}' must satisfy min_price <= base_price <= max_price "
            f"(got {min_price} / {base_price} / {max_price})"
        )


class TierConfigService:
    """Service class for pricing tier bands"""

    def __init__(self, db: Session):
        self.db = db

    def list_configs(self) -> List[PricingTierConfig]:
        """All bands, gold first"""
        rows = self.db.execute(select(PricingTierConfig)).scalars().all()
        order = {tier.value: index for index, tier in enumerate(TIER_ORDER)}
        return sorted(rows, key=lambda row: order.get(row.tier, len(order)))

    def band_for(self, tier: Union[PricingTier, str]) -> Optional[PricingTierConfig]:
        tier_value = PricingTier(tier).value
        return self.db.execute(
            select(PricingTierConfig).where(PricingTierConfig.tier == tier_value)
        ).scalar_one_or_none()

    def require_band(self, tier: Union[PricingTier, str]) -> PricingTierConfig:
        band = self.band_for(tier)
        if not band:
            raise ValidationError(f"No price band configured for tier '{PricingTier(tier).value}'")
        return band

    def tier_for_price(self, price: Decimal) -> PricingTier:
        """
        Highest tier whose band contains the price.

        Falls back to bronze when no band matches.
        """
        bands = {row.tier: row for row in self.list_configs()}
        for tier in TIER_ORDER:
            band = bands.get(tier.value)
            if band is not None and band.min_price <= price <= band.max_price:
                return tier
        return PricingTier.BRONZE

    def update_config(
        self,
        tier: PricingTier,
        data: TierConfigUpdate,
        actor_id: Optional[UUID] = None,
    ) -> PricingTierConfig:
        """
        Update a band; provided values are merged with the stored ones
        and the merged band is validated before the write.
        """
        band = self.band_for(tier)
        if not band:
            raise NotFoundError("Pricing tier config", tier.value)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        merged = {
            "min_price": changes.get("min_price", band.min_price),
            "base_price": changes.get("base_price", band.base_price),
            "max_price": changes.get("max_price", band.max_price),
        }
        check_band(merged["min_price"], merged["base_price"], merged["max_price"], tier.value)

        for field_name, value in merged.items():
            setattr(band, field_name, value)
        self.db.commit()
        self.db.refresh(band)

        logger.info(
            f"Tier {tier.value} band set to {band.min_price}/{band.base_price}/{band.max_price} by {actor_id}"
        )
        return band

    def ensure_defaults(self) -> int:
        """Insert missing default bands; returns how many were created"""
        existing = set(self.db.execute(select(PricingTierConfig.tier)).scalars().all())
        created = 0
        for tier, (min_price, base_price, max_price) in DEFAULT_TIER_BANDS.items():
            if tier.value in existing:
                continue
            self.db.add(PricingTierConfig(
                tier=tier.value,
                min_price=min_price,
                base_price=base_price,
                max_price=max_price,
            ))
            created += 1

        if created:
            self.db.commit()
            logger.info(f"Seeded {created} pricing tier band(s)")
        return created
