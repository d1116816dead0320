"""/v1/pricing-items - fee tier administration endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Response

from factoring_gateway.api.v1.schemas import (
    PricingItemCreate,
    PricingItemResponse,
    PricingItemUpdate,
    ValidityResponse,
)
from factoring_gateway.api.dependencies import get_pricing_table
from factoring_gateway.domain.exceptions import AlreadyExistsError, InvalidPricingItemError
from factoring_gateway.services.pricing_table import PricingTable

router = APIRouter()


@router.post("/pricing-items", response_model=PricingItemResponse, status_code=201)
def add_pricing_item(
    request_body: PricingItemCreate,
    pricing_table: PricingTable = Depends(get_pricing_table),
):
    """Register a new tier; fails with 409 if the tier is already live"""
    fields = request_body.model_dump(exclude={"tier_id"})
    try:
        item = pricing_table.add_pricing_item(request_body.tier_id, **fields)
    except AlreadyExistsError as e:
        logging.warning(f"Pricing item exists: {request_body.tier_id}")
        raise HTTPException(status_code=409, detail=str(e))

    return PricingItemResponse.from_domain(request_body.tier_id, item)


@router.put("/pricing-items/{tier_id}", response_model=PricingItemResponse)
def update_pricing_item(
    tier_id: str,
    request_body: PricingItemUpdate,
    pricing_table: PricingTable = Depends(get_pricing_table),
):
    """Overwrite every field of a live tier"""
    try:
        item = pricing_table.update_pricing_item(tier_id, **request_body.model_dump())
    except InvalidPricingItemError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return PricingItemResponse.from_domain(tier_id, item)


@router.delete("/pricing-items/{tier_id}", status_code=204)
def remove_pricing_item(tier_id: str, pricing_table: PricingTable = Depends(get_pricing_table)):
    pricing_table.remove_pricing_item(tier_id)
    return Response(status_code=204)


@router.get("/pricing-items/{tier_id}", response_model=PricingItemResponse)
def get_pricing_item(tier_id: str, pricing_table: PricingTable = Depends(get_pricing_table)):
    """Never 404s: an unknown tier reads as all zeros with is_valid=false"""
    return PricingItemResponse.from_domain(tier_id, pricing_table.get_pricing_item(tier_id))


@router.get("/pricing-items/{tier_id}/validity", response_model=ValidityResponse)
def is_pricing_item_valid(tier_id: str, pricing_table: PricingTable = Depends(get_pricing_table)):
    return ValidityResponse(tier_id=tier_id, is_valid=pricing_table.is_pricing_item_valid(tier_id))
