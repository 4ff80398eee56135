from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from greenquest.database.connection import get_db
from greenquest.schemas import PurchasePayload
from greenquest.services import economy
from greenquest.services.catalog import Catalog
from greenquest.utils.session import Identity, require_identity
from greenquest.utils.state import get_catalog

router = APIRouter(prefix="/api", tags=["shop"])


@router.get("/tags")
async def list_tags(catalog: Catalog = Depends(get_catalog)) -> dict:
    return {"tags": catalog.as_dicts()}


@router.post("/purchase-tag")
async def purchase_tag(
    payload: PurchasePayload,
    identity: Identity = Depends(require_identity),
    catalog: Catalog = Depends(get_catalog),
    db: Session = Depends(get_db),
) -> dict:
    result = economy.purchase_tag(db, identity, catalog, payload.id)
    return {"success": True, "coins": result.coins, "ownedTags": result.owned_tags}
