"""Offer pricing engine - tier validation, upfront split and settlement accrual"""

from datetime import datetime
from factoring_gateway.domain.models import OfferCheck, OfferParams, PricingItem, Settlement
from factoring_gateway.domain.exceptions import InsufficientReserveError, REJECTIONS_BY_CHECK
from factoring_gateway.utils.date_utils import full_days_between

# Ratios are integers over this denominator (10_000 == 100%)
BASIS_POINTS = 10_000
DAYS_PER_YEAR = 365


def normalize_tier_id(tier_id: str) -> str:
    """Tier ids are matched case-insensitively ("0x606A" == "0x606a")"""
    return tier_id.strip().lower()


def check_offer(
    item: PricingItem,
    tenure: int,
    advance_fee: int,
    discount_fee: int,
    factoring_fee: int,
    invoice_amount: int,
    available_amount: int,
) -> OfferCheck:
    """
    Validate an offer request against a tier.

    Checks run in a fixed order and the first failure wins:
    tenure, advance fee, discount fee, factoring fee, invoice amount,
    available amount. Bounds are inclusive; nothing is clamped.
    """
    if not item.min_tenure <= tenure <= item.max_tenure:
        return OfferCheck.rejected("tenure", tenure, item.min_tenure, item.max_tenure)

    if advance_fee > item.max_advanced_ratio:
        return OfferCheck.rejected("advance_fee", advance_fee, item.max_advanced_ratio)

    if discount_fee < item.min_discount_fee:
        return OfferCheck.rejected("discount_fee", discount_fee, item.min_discount_fee)

    if factoring_fee < item.min_factoring_fee:
        return OfferCheck.rejected("factoring_fee", factoring_fee, item.min_factoring_fee)

    if not item.min_amount <= invoice_amount <= item.max_amount:
        return OfferCheck.rejected(
            "invoice_amount", invoice_amount, item.min_amount, item.max_amount
        )

    if available_amount > invoice_amount:
        return OfferCheck.rejected("available_amount", available_amount, invoice_amount)

    return OfferCheck.ok()


def check_offer_params(item: PricingItem, params: OfferParams) -> OfferCheck:
    return check_offer(
        item,
        tenure=params.tenure,
        advance_fee=params.advance_fee,
        discount_fee=params.discount_fee,
        factoring_fee=params.factoring_fee,
        invoice_amount=params.invoice_amount,
        available_amount=params.available_amount,
    )


def raise_for_rejection(result: OfferCheck) -> None:
    """Turn a rejected check into its named exception, e.g. InvalidFactoringFee(40, 50)"""
    if result.is_ok:
        return
    raise REJECTIONS_BY_CHECK[result.check](result.actual, *result.bounds)


# --- Upfront split (at creation) ---


def calculate_advanced_amount(available_amount: int, advance_fee: int) -> int:
    return available_amount * advance_fee // BASIS_POINTS


def calculate_reserve(invoice_amount: int, advanced_amount: int) -> int:
    """Withheld remainder of the invoice, released net of fees at settlement"""
    return invoice_amount - advanced_amount


def calculate_upfront_fee(available_amount: int, factoring_fee: int) -> int:
    return available_amount * factoring_fee // BASIS_POINTS


# --- Settlement accrual ---


def calculate_late_days(due_date: datetime, settled_at: datetime) -> int:
    """Full days strictly past the due date; zero when settled on or before it"""
    return full_days_between(due_date, settled_at)


def calculate_factoring_amount(invoice_amount: int, factoring_fee: int) -> int:
    return invoice_amount * factoring_fee // BASIS_POINTS


def calculate_discount_amount(advanced_amount: int, discount_fee: int, tenure: int) -> int:
    """Discount fee accrues on the advance over the tenure, 365-day year"""
    return advanced_amount * discount_fee * tenure // (DAYS_PER_YEAR * BASIS_POINTS)


def calculate_late_amount(advanced_amount: int, late_fee: int, late_days: int) -> int:
    if late_days <= 0:
        return 0
    return advanced_amount * late_fee * late_days // (DAYS_PER_YEAR * BASIS_POINTS)


def calculate_settlement(
    params: OfferParams,
    advanced_amount: int,
    reserve: int,
    due_date: datetime,
    late_fee: int,
    settled_at: datetime,
) -> Settlement:
    """
    Compute the final fee/net split of the reserve.

    total = factoring + discount + late, net = reserve - total.
    Raises InsufficientReserveError instead of returning a negative net.
    """
    late_days = calculate_late_days(due_date, settled_at)

    factoring_amount = calculate_factoring_amount(params.invoice_amount, params.factoring_fee)
    discount_amount = calculate_discount_amount(advanced_amount, params.discount_fee, params.tenure)
    late_amount = calculate_late_amount(advanced_amount, late_fee, late_days)

    total_fees = factoring_amount + discount_amount + late_amount
    if total_fees > reserve:
        raise InsufficientReserveError(total_fees, reserve)

    return Settlement(
        number_of_late_days=late_days,
        factoring_amount=factoring_amount,
        discount_amount=discount_amount,
        late_amount=late_amount,
        total_calculated_fees=total_fees,
        net_amount=reserve - total_fees,
        # Rewards stay zero; no rebate rule is defined
        rewards=0,
    )
