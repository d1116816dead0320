"""Registry of approved settlement assets and their lender pools"""

import logging
from typing import Dict, Optional
from sqlalchemy.orm import Session

from factoring_gateway.domain.exceptions import AssetNotWhitelistedError
from factoring_gateway.infrastructure.database.repositories import LenderPoolRepository
from factoring_gateway.utils.address_utils import ensure_address, is_zero_address, normalize_asset_id

logger = logging.getLogger(__name__)


class AssetRegistry:
    """
    An asset is whitelisted once a lender pool is registered for it.

    Asset ids are keyed by normalize_asset_id, so lookups ignore case and
    surrounding whitespace.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = LenderPoolRepository(db)

    def set_lender_pool_address(self, asset_id: str, pool_address: str) -> None:
        asset_id = normalize_asset_id(ensure_address(asset_id, "asset"))
        pool_address = ensure_address(pool_address, "lender pool")
        try:
            self.repo.set_pool(asset_id, pool_address)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Lender pool set", extra={"asset_id": asset_id, "pool_address": pool_address})

    def is_asset_whitelisted(self, asset_id: str) -> bool:
        return self._get_pool(asset_id) is not None

    def pool_for(self, asset_id: str) -> str:
        pool = self._get_pool(asset_id)
        if pool is None:
            raise AssetNotWhitelistedError(asset_id)
        return pool

    def lender_pools(self) -> Dict[str, str]:
        return self.repo.list_pools()

    def _get_pool(self, asset_id: Optional[str]) -> Optional[str]:
        if is_zero_address(asset_id):
            return None
        return self.repo.get_pool(normalize_asset_id(asset_id))
