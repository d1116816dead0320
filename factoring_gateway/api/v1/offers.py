"""/v1/offers - offer validation, creation and settlement endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from factoring_gateway.api.v1.schemas import (
    OfferCheckRequest,
    OfferCheckResponse,
    OfferCreateRequest,
    OfferResponse,
    Rejection,
    RefundRequest,
)
from factoring_gateway.api.dependencies import get_offer_engine, get_request_id
from factoring_gateway.domain.exceptions import (
    AssetNotWhitelistedError,
    InsufficientReserveError,
    InvalidAddressError,
    InvalidOfferError,
    InvalidPricingItemError,
    OfferRejectedError,
    PaymentError,
    REJECTIONS_BY_CHECK,
)
from factoring_gateway.services.offers import OfferEngine

router = APIRouter()


@router.post("/offers/check", response_model=OfferCheckResponse)
def check_offer(request_body: OfferCheckRequest, engine: OfferEngine = Depends(get_offer_engine)):
    """
    Pre-flight an offer against its tier without moving funds.

    Returns valid=false with the first violated bound for business-rule
    rejections; an unknown tier is a 404.
    """
    terms = request_body.model_dump(exclude={"tier_id"})
    try:
        result = engine.check_offer(request_body.tier_id, **terms)
    except InvalidPricingItemError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if result.is_ok:
        return OfferCheckResponse(valid=True)

    return OfferCheckResponse(
        valid=False,
        rejection=Rejection(
            error=REJECTIONS_BY_CHECK[result.check].__name__,
            check=result.check,
            actual=result.actual,
            bounds=list(result.bounds),
        ),
    )


@router.post("/offers", response_model=OfferResponse, status_code=201)
def create_offer(
    request_body: OfferCreateRequest,
    request: Request,
    engine: OfferEngine = Depends(get_offer_engine),
):
    """
    Create an offer and disburse its advance.

    Flow:
    1. Resolve the tier (404 if not live)
    2. Check the settlement asset is whitelisted (400)
    3. Run the six tier checks (422 naming the violated bound)
    4. Persist the offer and instruct the advance payout (502 on failure)
    """
    request_id = get_request_id(request)

    try:
        offer = engine.create_offer(request_body.tier_id, request_body.to_params())

    except InvalidPricingItemError as e:
        raise HTTPException(status_code=404, detail=str(e))

    except OfferRejectedError as e:
        logging.warning(f"Offer rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=422,
            detail={"error": str(e), "check": e.check, "actual": e.actual, "bounds": list(e.bounds)},
        )

    except (AssetNotWhitelistedError, InvalidAddressError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    except PaymentError as e:
        logging.error(f"Payments error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Payments service unavailable")

    return OfferResponse.from_domain(offer)


@router.get("/offers/{offer_id}", response_model=OfferResponse)
def get_offer(offer_id: int, engine: OfferEngine = Depends(get_offer_engine)):
    offer = engine.get_offer(offer_id)
    if offer is None:
        raise HTTPException(status_code=404, detail="Offer not found")
    return OfferResponse.from_domain(offer)


@router.post("/offers/{offer_id}/refund", response_model=OfferResponse)
def reserve_refund(
    offer_id: int,
    request_body: RefundRequest,
    request: Request,
    engine: OfferEngine = Depends(get_offer_engine),
):
    """Settle an offer once; unknown or already settled offers are a 409"""
    request_id = get_request_id(request)

    try:
        offer = engine.reserve_refund(offer_id, request_body.due_date, request_body.late_fee)

    except InvalidOfferError as e:
        raise HTTPException(status_code=409, detail=str(e))

    except InsufficientReserveError as e:
        logging.warning(f"Settlement rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except InvalidAddressError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except PaymentError as e:
        logging.error(f"Payments error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Payments service unavailable")

    return OfferResponse.from_domain(offer)
