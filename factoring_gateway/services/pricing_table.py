"""Pricing table - administrable registry of fee tiers"""

import logging
import threading
from sqlalchemy.orm import Session

from factoring_gateway.domain.exceptions import AlreadyExistsError, InvalidPricingItemError
from factoring_gateway.domain.models import EMPTY_PRICING_ITEM, PricingItem
from factoring_gateway.domain.pricing import normalize_tier_id
from factoring_gateway.infrastructure.database.repositories import PricingItemRepository

logger = logging.getLogger(__name__)

# Serialises tier mutations across sessions
_pricing_lock = threading.Lock()


class PricingTable:
    """
    Fee tiers keyed by an administrator-chosen tier id.

    Each mutation commits on success and rolls back on failure. A removed
    tier reads exactly like one that was never added.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = PricingItemRepository(db)

    def add_pricing_item(
        self,
        tier_id: str,
        min_tenure: int,
        max_tenure: int,
        max_advanced_ratio: int,
        min_discount_fee: int,
        min_factoring_fee: int,
        min_amount: int,
        max_amount: int,
    ) -> PricingItem:
        key = normalize_tier_id(tier_id)
        item = PricingItem(
            min_tenure=min_tenure,
            max_tenure=max_tenure,
            max_advanced_ratio=max_advanced_ratio,
            min_discount_fee=min_discount_fee,
            min_factoring_fee=min_factoring_fee,
            min_amount=min_amount,
            max_amount=max_amount,
            status=True,
        )
        with _pricing_lock:
            try:
                if self._is_live(key):
                    raise AlreadyExistsError(tier_id)
                self.repo.upsert(key, item)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info("Pricing item added", extra={"tier_id": key})
        return item

    def update_pricing_item(
        self,
        tier_id: str,
        min_tenure: int,
        max_tenure: int,
        max_advanced_ratio: int,
        min_discount_fee: int,
        min_factoring_fee: int,
        min_amount: int,
        max_amount: int,
        status: bool = True,
    ) -> PricingItem:
        """Overwrite every field of a live tier; status=False retires it"""
        key = normalize_tier_id(tier_id)
        item = PricingItem(
            min_tenure=min_tenure,
            max_tenure=max_tenure,
            max_advanced_ratio=max_advanced_ratio,
            min_discount_fee=min_discount_fee,
            min_factoring_fee=min_factoring_fee,
            min_amount=min_amount,
            max_amount=max_amount,
            status=status,
        )
        with _pricing_lock:
            try:
                if not self._is_live(key):
                    raise InvalidPricingItemError(tier_id)
                self.repo.upsert(key, item)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info("Pricing item updated", extra={"tier_id": key, "status": status})
        return item

    def remove_pricing_item(self, tier_id: str) -> None:
        key = normalize_tier_id(tier_id)
        with _pricing_lock:
            try:
                self.repo.delete(key)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info("Pricing item removed", extra={"tier_id": key})

    def get_pricing_item(self, tier_id: str) -> PricingItem:
        record = self.repo.get(normalize_tier_id(tier_id))
        if record is None:
            return EMPTY_PRICING_ITEM
        return self.repo.to_domain(record)

    def is_pricing_item_valid(self, tier_id: str) -> bool:
        return self._is_live(normalize_tier_id(tier_id))

    def get_live_item(self, tier_id: str) -> PricingItem:
        """Tier lookup used by offer validation; a missing tier is a hard failure"""
        item = self.get_pricing_item(tier_id)
        if not item.is_valid():
            raise InvalidPricingItemError(tier_id)
        return item

    def _is_live(self, key: str) -> bool:
        record = self.repo.get(key)
        return record is not None and record.status
