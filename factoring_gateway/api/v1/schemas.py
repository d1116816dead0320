"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Annotated, Dict, List, Optional

from factoring_gateway.domain.models import Offer, OfferParams, PricingItem

BasisPoints = Annotated[int, Field(ge=0, le=10_000, description="Ratio in basis points (10000 = 100%)")]


class PricingItemFields(BaseModel):
    """Bounds of a fee tier"""

    min_tenure: int = Field(..., ge=0, description="Minimum tenure in days")
    max_tenure: int = Field(..., ge=0, description="Maximum tenure in days")
    max_advanced_ratio: BasisPoints
    min_discount_fee: BasisPoints
    min_factoring_fee: BasisPoints
    min_amount: int = Field(..., ge=0, description="Minimum invoice amount")
    max_amount: int = Field(..., ge=0, description="Maximum invoice amount")


class PricingItemCreate(PricingItemFields):
    """Request body for POST /v1/pricing-items"""

    tier_id: str = Field(..., min_length=1, max_length=64, description="Tier identifier, e.g. 0x57A2")


class PricingItemUpdate(PricingItemFields):
    """Request body for PUT /v1/pricing-items/{tier_id}"""

    status: bool = True


class PricingItemResponse(PricingItemFields):
    """Tier as stored; all zeros and is_valid=false when absent"""

    tier_id: str
    is_valid: bool

    @classmethod
    def from_domain(cls, tier_id: str, item: PricingItem) -> "PricingItemResponse":
        return cls(
            tier_id=tier_id,
            min_tenure=item.min_tenure,
            max_tenure=item.max_tenure,
            max_advanced_ratio=item.max_advanced_ratio,
            min_discount_fee=item.min_discount_fee,
            min_factoring_fee=item.min_factoring_fee,
            min_amount=item.min_amount,
            max_amount=item.max_amount,
            is_valid=item.is_valid(),
        )


class ValidityResponse(BaseModel):
    tier_id: str
    is_valid: bool


class OfferTerms(BaseModel):
    """Requested pricing of an offer"""

    tenure: int = Field(..., ge=0, description="Tenure in days")
    advance_fee: BasisPoints
    discount_fee: BasisPoints
    factoring_fee: BasisPoints
    invoice_amount: int = Field(..., ge=0)
    available_amount: int = Field(..., ge=0)


class OfferCheckRequest(OfferTerms):
    """Request body for POST /v1/offers/check"""

    tier_id: str = Field(..., min_length=1, max_length=64)


class Rejection(BaseModel):
    error: str
    check: str
    actual: int
    bounds: List[int]


class OfferCheckResponse(BaseModel):
    """Response for POST /v1/offers/check"""

    valid: bool
    rejection: Optional[Rejection] = None


class OfferCreateRequest(OfferTerms):
    """Request body for POST /v1/offers"""

    tier_id: str = Field(..., min_length=1, max_length=64)
    grace_period: int = Field(..., ge=0, description="Grace period in days")
    asset_id: str = Field(..., min_length=1, description="Settlement asset identifier")

    def to_params(self) -> OfferParams:
        return OfferParams(
            advance_fee=self.advance_fee,
            discount_fee=self.discount_fee,
            factoring_fee=self.factoring_fee,
            grace_period=self.grace_period,
            tenure=self.tenure,
            invoice_amount=self.invoice_amount,
            available_amount=self.available_amount,
            asset_id=self.asset_id,
        )


class RefundRequest(BaseModel):
    """Request body for POST /v1/offers/{offer_id}/refund"""

    due_date: datetime
    late_fee: int = Field(..., ge=0, description="Annual late fee in basis points")


class OfferParamsSchema(BaseModel):
    tier_id: str
    advance_fee: int
    discount_fee: int
    factoring_fee: int
    grace_period: int
    tenure: int
    invoice_amount: int
    available_amount: int
    asset_id: str


class RefundedSchema(BaseModel):
    due_date: datetime
    late_fee: int
    number_of_late_days: int
    total_calculated_fees: int
    net_amount: int
    rewards: int
    settled_at: Optional[datetime] = None


class OfferResponse(BaseModel):
    """Offer with its settlement record once settled"""

    offer_id: int
    state: str
    params: OfferParamsSchema
    advanced_amount: int
    reserve: int
    upfront_fee: int
    disbursing_advance_date: datetime
    refunded: Optional[RefundedSchema] = None

    @classmethod
    def from_domain(cls, offer: Offer) -> "OfferResponse":
        p = offer.params
        refunded = None
        if offer.refunded is not None:
            r = offer.refunded
            refunded = RefundedSchema(
                due_date=r.due_date,
                late_fee=r.late_fee,
                number_of_late_days=r.number_of_late_days,
                total_calculated_fees=r.total_calculated_fees,
                net_amount=r.net_amount,
                rewards=r.rewards,
                settled_at=r.settled_at,
            )
        return cls(
            offer_id=offer.offer_id,
            state=offer.state,
            params=OfferParamsSchema(
                tier_id=p.tier_id,
                advance_fee=p.advance_fee,
                discount_fee=p.discount_fee,
                factoring_fee=p.factoring_fee,
                grace_period=p.grace_period,
                tenure=p.tenure,
                invoice_amount=p.invoice_amount,
                available_amount=p.available_amount,
                asset_id=p.asset_id,
            ),
            advanced_amount=offer.advanced_amount,
            reserve=offer.reserve,
            upfront_fee=offer.upfront_fee,
            disbursing_advance_date=offer.disbursing_advance_date,
            refunded=refunded,
        )


class AddressRequest(BaseModel):
    address: str


class AdminSettingsResponse(BaseModel):
    """Response for GET /v1/admin/settings"""

    treasury_address: Optional[str] = None
    lender_pools: Dict[str, str]
