"""Data access layer for tiers, offers and administrative settings"""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from factoring_gateway.infrastructure.database.models import (
    AdminSetting,
    LenderPoolRecord,
    OfferRecord,
    OfferRefundRecord,
    PricingItemRecord,
    SequenceCounter,
    OFFER_SEQUENCE,
)
from factoring_gateway.domain.models import Offer, OfferParams, OfferRefunded, PricingItem
from factoring_gateway.utils.date_utils import as_utc


class PricingItemRepository:
    """Repository for pricing tiers"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, tier_id: str) -> Optional[PricingItemRecord]:
        return self.db.get(PricingItemRecord, tier_id)

    def upsert(self, tier_id: str, item: PricingItem) -> PricingItemRecord:
        """Write every field of the tier, replacing any previous row"""
        record = self.get(tier_id)
        if record is None:
            record = PricingItemRecord(tier_id=tier_id)
            self.db.add(record)

        record.min_tenure = item.min_tenure
        record.max_tenure = item.max_tenure
        record.max_advanced_ratio = item.max_advanced_ratio
        record.min_discount_fee = item.min_discount_fee
        record.min_factoring_fee = item.min_factoring_fee
        record.min_amount = item.min_amount
        record.max_amount = item.max_amount
        record.status = item.status
        self.db.flush()
        return record

    def delete(self, tier_id: str) -> None:
        record = self.get(tier_id)
        if record is not None:
            self.db.delete(record)
            self.db.flush()

    @staticmethod
    def to_domain(record: PricingItemRecord) -> PricingItem:
        return PricingItem(
            min_tenure=record.min_tenure,
            max_tenure=record.max_tenure,
            max_advanced_ratio=record.max_advanced_ratio,
            min_discount_fee=record.min_discount_fee,
            min_factoring_fee=record.min_factoring_fee,
            min_amount=record.min_amount,
            max_amount=record.max_amount,
            status=record.status,
        )


class OfferRepository:
    """Repository for financing offers and their settlement records"""

    def __init__(self, db: Session):
        self.db = db

    def next_offer_id(self) -> int:
        """
        Allocate the next offer id from the locked counter row.

        Ids start at 1 and only grow. The row stays locked until the caller's
        transaction ends, so concurrent workers queue here instead of racing
        on the primary key; a rollback returns the id.
        """
        counter = (
            self.db.query(SequenceCounter)
            .filter(SequenceCounter.name == OFFER_SEQUENCE)
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )
        if counter is None:
            # Tables created before the counter existed: continue after the highest id
            current = self.db.query(func.max(OfferRecord.id)).scalar() or 0
            counter = SequenceCounter(name=OFFER_SEQUENCE, current_value=current)
            self.db.add(counter)

        counter.current_value += 1
        self.db.flush()
        return counter.current_value

    def create_offer(self, offer: Offer) -> OfferRecord:
        """Persist a freshly created offer"""
        params = offer.params
        record = OfferRecord(
            id=offer.offer_id,
            tier_id=params.tier_id,
            advance_fee=params.advance_fee,
            discount_fee=params.discount_fee,
            factoring_fee=params.factoring_fee,
            grace_period=params.grace_period,
            tenure=params.tenure,
            invoice_amount=params.invoice_amount,
            available_amount=params.available_amount,
            asset_id=params.asset_id,
            advanced_amount=offer.advanced_amount,
            reserve=offer.reserve,
            upfront_fee=offer.upfront_fee,
            disbursing_advance_date=offer.disbursing_advance_date,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def get_offer(self, offer_id: int, for_update: bool = False) -> Optional[OfferRecord]:
        query = self.db.query(OfferRecord).filter(OfferRecord.id == offer_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    def record_refund(self, offer: OfferRecord, refunded: OfferRefunded) -> OfferRefundRecord:
        """Attach the settlement record; the primary key forbids a second one"""
        record = OfferRefundRecord(
            offer=offer,
            due_date=refunded.due_date,
            late_fee=refunded.late_fee,
            number_of_late_days=refunded.number_of_late_days,
            total_calculated_fees=refunded.total_calculated_fees,
            net_amount=refunded.net_amount,
            rewards=refunded.rewards,
            settled_at=refunded.settled_at,
        )
        self.db.add(record)
        self.db.flush()
        return record

    @staticmethod
    def to_domain(record: OfferRecord) -> Offer:
        refunded = None
        if record.refund is not None:
            refund = record.refund
            refunded = OfferRefunded(
                due_date=as_utc(refund.due_date),
                late_fee=refund.late_fee,
                number_of_late_days=refund.number_of_late_days,
                total_calculated_fees=refund.total_calculated_fees,
                net_amount=refund.net_amount,
                rewards=refund.rewards,
                settled_at=as_utc(refund.settled_at),
            )

        return Offer(
            offer_id=record.id,
            params=OfferParams(
                tier_id=record.tier_id,
                advance_fee=record.advance_fee,
                discount_fee=record.discount_fee,
                factoring_fee=record.factoring_fee,
                grace_period=record.grace_period,
                tenure=record.tenure,
                invoice_amount=record.invoice_amount,
                available_amount=record.available_amount,
                asset_id=record.asset_id,
            ),
            advanced_amount=record.advanced_amount,
            reserve=record.reserve,
            upfront_fee=record.upfront_fee,
            disbursing_advance_date=as_utc(record.disbursing_advance_date),
            refunded=refunded,
        )


class LenderPoolRepository:
    """Repository for whitelisted settlement assets"""

    def __init__(self, db: Session):
        self.db = db

    def get_pool(self, asset_id: str) -> Optional[str]:
        record = self.db.get(LenderPoolRecord, asset_id)
        return record.pool_address if record else None

    def set_pool(self, asset_id: str, pool_address: str) -> LenderPoolRecord:
        record = self.db.get(LenderPoolRecord, asset_id)
        if record is None:
            record = LenderPoolRecord(asset_id=asset_id, pool_address=pool_address)
            self.db.add(record)
        else:
            record.pool_address = pool_address
        self.db.flush()
        return record

    def list_pools(self) -> dict:
        return {
            r.asset_id: r.pool_address
            for r in self.db.query(LenderPoolRecord).order_by(LenderPoolRecord.asset_id).all()
        }


class AdminSettingRepository:
    """Repository for address-valued administrative settings"""

    def __init__(self, db: Session):
        self.db = db

    def get_address(self, key: str) -> Optional[str]:
        record = self.db.get(AdminSetting, key)
        return record.address if record else None

    def set_address(self, key: str, address: str) -> AdminSetting:
        record = self.db.get(AdminSetting, key)
        if record is None:
            record = AdminSetting(key=key, address=address)
            self.db.add(record)
        else:
            record.address = address
        self.db.flush()
        return record
