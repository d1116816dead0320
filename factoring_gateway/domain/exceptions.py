"""Domain-specific exceptions"""

from typing import Tuple


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AlreadyExistsError(DomainException):
    """Pricing item is already live for this tier"""

    def __init__(self, tier_id: str):
        super().__init__("Already exists, please update")
        self.tier_id = tier_id


class InvalidPricingItemError(DomainException):
    """Tier is not a live pricing item"""

    def __init__(self, tier_id: str):
        super().__init__("Invalid Pricing Item")
        self.tier_id = tier_id


class AssetNotWhitelistedError(DomainException):
    """Settlement asset has no lender pool registered"""

    def __init__(self, asset_id: str):
        super().__init__("Stable Address not whitelisted")
        self.asset_id = asset_id


class InvalidAddressError(DomainException):
    """Administrative address is missing or the zero address"""

    pass


class InvalidOfferError(DomainException):
    """Offer does not exist or has already been settled"""

    def __init__(self, offer_id: int):
        super().__init__("Invalid Offer")
        self.offer_id = offer_id


class InsufficientReserveError(DomainException):
    """Calculated fees exceed the reserve withheld at creation"""

    def __init__(self, total_fees: int, reserve: int):
        super().__init__(f"Fees {total_fees} exceed reserve {reserve}")
        self.total_fees = total_fees
        self.reserve = reserve


class PaymentError(DomainException):
    """Payments service rejected a payout or is unavailable"""

    pass


class OfferRejectedError(DomainException):
    """
    Offer request violates a bound of its pricing tier.

    The message is rendered as ``Name(actual, bound, ...)`` so callers can
    fix the request without fetching the tier again.
    """

    check: str = ""

    def __init__(self, actual: int, *bounds: int):
        self.actual = actual
        self.bounds: Tuple[int, ...] = tuple(bounds)
        values = ", ".join(str(v) for v in (actual, *bounds))
        super().__init__(f"{type(self).__name__}({values})")


class InvalidTenure(OfferRejectedError):
    check = "tenure"


class InvalidAdvanceFee(OfferRejectedError):
    check = "advance_fee"


class InvalidDiscountFee(OfferRejectedError):
    check = "discount_fee"


class InvalidFactoringFee(OfferRejectedError):
    check = "factoring_fee"


class InvalidInvoiceAmount(OfferRejectedError):
    check = "invoice_amount"


class InvalidAvailableAmount(OfferRejectedError):
    check = "available_amount"


REJECTIONS_BY_CHECK = {
    cls.check: cls
    for cls in (
        InvalidTenure,
        InvalidAdvanceFee,
        InvalidDiscountFee,
        InvalidFactoringFee,
        InvalidInvoiceAmount,
        InvalidAvailableAmount,
    )
}
