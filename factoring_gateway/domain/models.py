"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class PricingItem:
    """Fee tier: allowed tenure, fee ratios (basis points) and invoice bounds"""

    min_tenure: int = 0
    max_tenure: int = 0
    max_advanced_ratio: int = 0
    min_discount_fee: int = 0
    min_factoring_fee: int = 0
    min_amount: int = 0
    max_amount: int = 0
    status: bool = False

    def is_valid(self) -> bool:
        return self.status


# Removed and never-added tiers both read as this
EMPTY_PRICING_ITEM = PricingItem()


@dataclass(frozen=True)
class OfferParams:
    """Snapshot of an offer request, captured at creation and never mutated"""

    advance_fee: int
    discount_fee: int
    factoring_fee: int
    grace_period: int  # days
    tenure: int  # days
    invoice_amount: int
    available_amount: int
    asset_id: str
    tier_id: str = ""


@dataclass(frozen=True)
class OfferRefunded:
    """Settlement record, written exactly once"""

    due_date: datetime
    late_fee: int
    number_of_late_days: int
    total_calculated_fees: int
    net_amount: int
    rewards: int = 0
    settled_at: Optional[datetime] = None


@dataclass
class Offer:
    """Financing offer: upfront split plus optional settlement record"""

    offer_id: int
    params: OfferParams
    advanced_amount: int
    reserve: int
    upfront_fee: int
    disbursing_advance_date: datetime
    refunded: Optional[OfferRefunded] = None

    @property
    def is_settled(self) -> bool:
        return self.refunded is not None

    @property
    def state(self) -> str:
        return "settled" if self.is_settled else "created"


@dataclass(frozen=True)
class OfferCheck:
    """
    Outcome of validating an offer request against its tier.

    Either ok, or rejected naming the first failing check together with
    the offending value and the bound(s) it was compared against.
    """

    check: Optional[str] = None
    actual: Optional[int] = None
    bounds: Tuple[int, ...] = ()

    @classmethod
    def ok(cls) -> "OfferCheck":
        return cls()

    @classmethod
    def rejected(cls, check: str, actual: int, *bounds: int) -> "OfferCheck":
        return cls(check=check, actual=actual, bounds=tuple(bounds))

    @property
    def is_ok(self) -> bool:
        return self.check is None

    def __bool__(self) -> bool:
        return self.is_ok


@dataclass(frozen=True)
class Settlement:
    """Fee breakdown computed at settlement time"""

    number_of_late_days: int
    factoring_amount: int
    discount_amount: int
    late_amount: int
    total_calculated_fees: int
    net_amount: int
    rewards: int = 0
