"""SQLAlchemy ORM models for tiers, offers and administrative settings"""

from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Integer, ForeignKey, Text, event
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class PricingItemRecord(Base):
    """Fee tier keyed by administrator-chosen tier id"""

    __tablename__ = "pricing_item"

    tier_id = Column(String(64), primary_key=True)
    min_tenure = Column(Integer, nullable=False)
    max_tenure = Column(Integer, nullable=False)
    max_advanced_ratio = Column(Integer, nullable=False)
    min_discount_fee = Column(Integer, nullable=False)
    min_factoring_fee = Column(Integer, nullable=False)
    min_amount = Column(BigInteger, nullable=False)
    max_amount = Column(BigInteger, nullable=False)
    status = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class OfferRecord(Base):
    """Financing offer with its immutable request snapshot"""

    __tablename__ = "offer"

    id = Column(Integer, primary_key=True, autoincrement=False)
    tier_id = Column(String(64), nullable=False, index=True)
    advance_fee = Column(Integer, nullable=False)
    discount_fee = Column(Integer, nullable=False)
    factoring_fee = Column(Integer, nullable=False)
    grace_period = Column(Integer, nullable=False)
    tenure = Column(Integer, nullable=False)
    invoice_amount = Column(BigInteger, nullable=False)
    available_amount = Column(BigInteger, nullable=False)
    asset_id = Column(Text, nullable=False)
    advanced_amount = Column(BigInteger, nullable=False)
    reserve = Column(BigInteger, nullable=False)
    upfront_fee = Column(BigInteger, nullable=False)
    disbursing_advance_date = Column(DateTime(timezone=True), nullable=False)

    refund = relationship("OfferRefundRecord", back_populates="offer", uselist=False)


class OfferRefundRecord(Base):
    """Settlement record; its presence marks the offer as settled"""

    __tablename__ = "offer_refund"

    offer_id = Column(Integer, ForeignKey("offer.id"), primary_key=True)
    due_date = Column(DateTime(timezone=True), nullable=False)
    late_fee = Column(Integer, nullable=False)
    number_of_late_days = Column(Integer, nullable=False)
    total_calculated_fees = Column(BigInteger, nullable=False)
    net_amount = Column(BigInteger, nullable=False)
    rewards = Column(BigInteger, nullable=False, default=0)
    settled_at = Column(DateTime(timezone=True), nullable=False)

    offer = relationship("OfferRecord", back_populates="refund")


class LenderPoolRecord(Base):
    """Whitelisted settlement asset and the pool its liquidity is drawn from"""

    __tablename__ = "lender_pool"

    asset_id = Column(Text, primary_key=True)
    pool_address = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class AdminSetting(Base):
    """Address-valued administrative setting (e.g. treasury)"""

    __tablename__ = "admin_setting"

    key = Column(String(64), primary_key=True)
    address = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class SequenceCounter(Base):
    """Monotonic counter; the row is locked while a value is being allocated"""

    __tablename__ = "sequence_counter"

    name = Column(String(64), primary_key=True)
    current_value = Column(BigInteger, nullable=False, default=0)


OFFER_SEQUENCE = "offer"


@event.listens_for(SequenceCounter.__table__, "after_create")
def _seed_sequences(target, connection, **kw):
    connection.execute(target.insert(), [{"name": OFFER_SEQUENCE, "current_value": 0}])
