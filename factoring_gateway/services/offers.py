"""Offer engine - validates, creates and settles financing offers"""

import dataclasses
import logging
import threading
from datetime import datetime
from typing import Callable, Optional
from sqlalchemy.orm import Session

from factoring_gateway.config import settings
from factoring_gateway.domain.exceptions import (
    AssetNotWhitelistedError,
    InvalidAddressError,
    InvalidOfferError,
    PaymentError,
)
from factoring_gateway.domain.models import Offer, OfferCheck, OfferParams, OfferRefunded
from factoring_gateway.domain.pricing import (
    calculate_advanced_amount,
    calculate_reserve,
    calculate_settlement,
    calculate_upfront_fee,
    check_offer,
    check_offer_params,
    normalize_tier_id,
    raise_for_rejection,
)
from factoring_gateway.infrastructure.clients.payments import PaymentsClient
from factoring_gateway.infrastructure.database.repositories import AdminSettingRepository, OfferRepository
from factoring_gateway.infrastructure.observability.logging import log_offer_created, log_offer_settled
from factoring_gateway.infrastructure.observability.metrics import (
    payout_failure_counter,
    record_offer_created,
    record_rejection,
    record_settlement,
)
from factoring_gateway.services.asset_registry import AssetRegistry
from factoring_gateway.services.pricing_table import PricingTable
from factoring_gateway.utils.address_utils import ensure_address
from factoring_gateway.utils.date_utils import as_utc, utc_now

logger = logging.getLogger(__name__)

TREASURY_KEY = "treasury"

# Serialises id allocation and the settled check-then-write within a process;
# across processes the counter and offer rows are read FOR UPDATE
_offer_lock = threading.Lock()


class OfferEngine:
    """
    Financing offers against pricing-table tiers.

    Every public operation is all-or-nothing: state changes and the payout
    instruction either both happen or the session is rolled back.
    """

    def __init__(
        self,
        db: Session,
        pricing_table: PricingTable,
        asset_registry: AssetRegistry,
        payments: PaymentsClient,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.offers = OfferRepository(db)
        self.admin_settings = AdminSettingRepository(db)
        self.payments = payments
        self.clock = clock
        self.set_pricing_table(pricing_table)
        self.set_asset_registry(asset_registry)

    # --- Administrative configuration ---

    @property
    def pricing_table(self) -> PricingTable:
        return self._pricing_table

    def set_pricing_table(self, pricing_table: Optional[PricingTable]) -> None:
        if pricing_table is None:
            raise InvalidAddressError("Invalid pricing table: zero address")
        self._pricing_table = pricing_table

    @property
    def asset_registry(self) -> AssetRegistry:
        return self._asset_registry

    def set_asset_registry(self, asset_registry: Optional[AssetRegistry]) -> None:
        if asset_registry is None:
            raise InvalidAddressError("Invalid asset registry: zero address")
        self._asset_registry = asset_registry

    @property
    def treasury_address(self) -> Optional[str]:
        return self.admin_settings.get_address(TREASURY_KEY) or settings.treasury_address

    def set_treasury_address(self, address: Optional[str]) -> None:
        address = ensure_address(address, "treasury")
        try:
            self.admin_settings.set_address(TREASURY_KEY, address)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Treasury address set", extra={"treasury_address": address})

    # --- Validation & creation ---

    def check_offer(
        self,
        tier_id: str,
        tenure: int,
        advance_fee: int,
        discount_fee: int,
        factoring_fee: int,
        invoice_amount: int,
        available_amount: int,
    ) -> OfferCheck:
        """Pre-flight an offer; raises only if the tier itself is not live"""
        item = self.pricing_table.get_live_item(tier_id)
        return check_offer(
            item,
            tenure=tenure,
            advance_fee=advance_fee,
            discount_fee=discount_fee,
            factoring_fee=factoring_fee,
            invoice_amount=invoice_amount,
            available_amount=available_amount,
        )

    def check_offer_validity(
        self,
        tier_id: str,
        tenure: int,
        advance_fee: int,
        discount_fee: int,
        factoring_fee: int,
        invoice_amount: int,
        available_amount: int,
    ) -> bool:
        return self.check_offer(
            tier_id,
            tenure=tenure,
            advance_fee=advance_fee,
            discount_fee=discount_fee,
            factoring_fee=factoring_fee,
            invoice_amount=invoice_amount,
            available_amount=available_amount,
        ).is_ok

    def create_offer(self, tier_id: str, params: OfferParams) -> Offer:
        """
        Validate params against the tier, persist the offer and pay out the advance.

        Raises:
            InvalidPricingItemError: tier is not live
            AssetNotWhitelistedError: no lender pool for the settlement asset
            OfferRejectedError: one of the six tier bounds is violated
            PaymentError: payout instruction failed; nothing is persisted
        """
        item = self.pricing_table.get_live_item(tier_id)

        if not self.asset_registry.is_asset_whitelisted(params.asset_id):
            raise AssetNotWhitelistedError(params.asset_id)

        result = check_offer_params(item, params)
        if not result:
            record_rejection(result.check)
            raise_for_rejection(result)

        treasury = self._require_treasury()
        params = dataclasses.replace(params, tier_id=normalize_tier_id(tier_id), asset_id=params.asset_id.strip())
        advanced_amount = calculate_advanced_amount(params.available_amount, params.advance_fee)

        with _offer_lock:
            try:
                pool = self.asset_registry.pool_for(params.asset_id)
                offer = Offer(
                    offer_id=self.offers.next_offer_id(),
                    params=params,
                    advanced_amount=advanced_amount,
                    reserve=calculate_reserve(params.invoice_amount, advanced_amount),
                    upfront_fee=calculate_upfront_fee(params.available_amount, params.factoring_fee),
                    disbursing_advance_date=as_utc(self.clock()),
                )
                self.offers.create_offer(offer)
                self._pay_out(
                    "create_offer",
                    asset_id=params.asset_id,
                    source=pool,
                    destination=treasury,
                    amount=offer.advanced_amount,
                    fee=offer.upfront_fee,
                    reference=f"offer-{offer.offer_id}-advance",
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        record_offer_created(params.tier_id, offer.advanced_amount)
        log_offer_created(offer)
        return offer

    # --- Settlement ---

    def reserve_refund(self, offer_id: int, due_date: datetime, late_fee: int) -> Offer:
        """
        Settle an offer: accrue fees, release the net reserve, mark it settled.

        Raises:
            InvalidOfferError: offer unknown or already settled
            InsufficientReserveError: fees would exceed the reserve
            PaymentError: payout instruction failed; the offer stays unsettled
        """
        treasury = self._require_treasury()

        with _offer_lock:
            try:
                record = self.offers.get_offer(offer_id, for_update=True)
                if record is None or record.refund is not None:
                    raise InvalidOfferError(offer_id)

                offer = self.offers.to_domain(record)
                settled_at = as_utc(self.clock())
                settlement = calculate_settlement(
                    offer.params,
                    advanced_amount=offer.advanced_amount,
                    reserve=offer.reserve,
                    due_date=due_date,
                    late_fee=late_fee,
                    settled_at=settled_at,
                )
                refunded = OfferRefunded(
                    due_date=as_utc(due_date),
                    late_fee=late_fee,
                    number_of_late_days=settlement.number_of_late_days,
                    total_calculated_fees=settlement.total_calculated_fees,
                    net_amount=settlement.net_amount,
                    rewards=settlement.rewards,
                    settled_at=settled_at,
                )
                self.offers.record_refund(record, refunded)
                self._pay_out(
                    "reserve_refund",
                    asset_id=offer.params.asset_id,
                    source=self.asset_registry.pool_for(offer.params.asset_id),
                    destination=treasury,
                    amount=refunded.net_amount,
                    fee=refunded.total_calculated_fees,
                    reference=f"offer-{offer_id}-refund",
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        offer.refunded = refunded
        record_settlement(refunded.number_of_late_days, refunded.total_calculated_fees)
        log_offer_settled(offer)
        return offer

    settle = reserve_refund

    def get_offer(self, offer_id: int) -> Optional[Offer]:
        record = self.offers.get_offer(offer_id)
        return self.offers.to_domain(record) if record else None

    def _require_treasury(self) -> str:
        treasury = self.treasury_address
        if not treasury:
            raise InvalidAddressError("Treasury address not configured")
        return treasury

    def _pay_out(self, operation: str, **instruction) -> None:
        try:
            self.payments.pay_out(**instruction)
        except PaymentError:
            payout_failure_counter.labels(operation=operation).inc()
            logger.error("Payout failed", extra={"operation": operation, "reference": instruction.get("reference")})
            raise
