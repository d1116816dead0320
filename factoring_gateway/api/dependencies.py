"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from factoring_gateway.infrastructure.clients.payments import PaymentsClient
from factoring_gateway.infrastructure.database.session import get_db
from factoring_gateway.services.asset_registry import AssetRegistry
from factoring_gateway.services.offers import OfferEngine
from factoring_gateway.services.pricing_table import PricingTable


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_payments_client() -> PaymentsClient:
    """Provide Payments API client instance"""
    return PaymentsClient()


def get_pricing_table(db: Session = Depends(get_db)) -> PricingTable:
    return PricingTable(db)


def get_asset_registry(db: Session = Depends(get_db)) -> AssetRegistry:
    return AssetRegistry(db)


def get_offer_engine(
    db: Session = Depends(get_db),
    pricing_table: PricingTable = Depends(get_pricing_table),
    asset_registry: AssetRegistry = Depends(get_asset_registry),
    payments: PaymentsClient = Depends(get_payments_client),
) -> OfferEngine:
    """Provide an offer engine bound to the request's session"""
    return OfferEngine(db, pricing_table, asset_registry, payments)
