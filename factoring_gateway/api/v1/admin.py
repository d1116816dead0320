"""/v1/admin - address-valued administrative settings"""

from fastapi import APIRouter, Depends, HTTPException

from factoring_gateway.api.v1.schemas import AddressRequest, AdminSettingsResponse
from factoring_gateway.api.dependencies import get_asset_registry, get_offer_engine
from factoring_gateway.domain.exceptions import InvalidAddressError
from factoring_gateway.services.asset_registry import AssetRegistry
from factoring_gateway.services.offers import OfferEngine

router = APIRouter()


@router.get("/admin/settings", response_model=AdminSettingsResponse)
def get_settings(
    engine: OfferEngine = Depends(get_offer_engine),
    asset_registry: AssetRegistry = Depends(get_asset_registry),
):
    return AdminSettingsResponse(
        treasury_address=engine.treasury_address,
        lender_pools=asset_registry.lender_pools(),
    )


@router.put("/admin/treasury", response_model=AdminSettingsResponse)
def set_treasury(
    request_body: AddressRequest,
    engine: OfferEngine = Depends(get_offer_engine),
    asset_registry: AssetRegistry = Depends(get_asset_registry),
):
    try:
        engine.set_treasury_address(request_body.address)
    except InvalidAddressError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return get_settings(engine, asset_registry)


@router.put("/admin/lender-pools/{asset_id}", response_model=AdminSettingsResponse)
def set_lender_pool(
    asset_id: str,
    request_body: AddressRequest,
    engine: OfferEngine = Depends(get_offer_engine),
    asset_registry: AssetRegistry = Depends(get_asset_registry),
):
    """Whitelist a settlement asset by registering its lender pool"""
    try:
        asset_registry.set_lender_pool_address(asset_id, request_body.address)
    except InvalidAddressError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return get_settings(engine, asset_registry)
