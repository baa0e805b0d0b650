"""
Other asset API endpoints (manually valued holdings counted in net worth).
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Optional
from sqlalchemy.orm import Session

from fintrack.db.database import get_db
from fintrack.db.models import OtherAsset

router = APIRouter()


class AssetCreate(BaseModel):
    name: str
    value: float = Field(ge=0)


class AssetUpdate(BaseModel):
    name: Optional[str] = None
    value: Optional[float] = Field(default=None, ge=0)


def asset_to_dict(asset: OtherAsset) -> dict:
    return {"id": asset.id, "name": asset.name, "value": asset.value}


def _get_asset(db: Session, asset_id: str) -> OtherAsset:
    asset = (
        db.query(OtherAsset)
        .filter(OtherAsset.id == asset_id, OtherAsset.is_deleted == False)
        .first()
    )
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset


@router.get("/")
async def list_assets(db: Session = Depends(get_db)):
    """List other assets."""
    assets = db.query(OtherAsset).filter(OtherAsset.is_deleted == False).all()
    return {"assets": [asset_to_dict(a) for a in assets], "total": len(assets)}


@router.post("/", status_code=201)
async def create_asset(asset_data: AssetCreate, db: Session = Depends(get_db)):
    """Create an asset."""
    db_asset = OtherAsset(**asset_data.model_dump())
    db.add(db_asset)
    db.commit()
    db.refresh(db_asset)
    return asset_to_dict(db_asset)


@router.get("/{asset_id}")
async def get_asset(asset_id: str, db: Session = Depends(get_db)):
    """Get an asset by ID."""
    return asset_to_dict(_get_asset(db, asset_id))


@router.put("/{asset_id}")
async def update_asset(
    asset_id: str, asset_data: AssetUpdate, db: Session = Depends(get_db)
):
    """Update an asset."""
    db_asset = _get_asset(db, asset_id)
    for field, value in asset_data.model_dump(exclude_unset=True).items():
        setattr(db_asset, field, value)
    db.commit()
    db.refresh(db_asset)
    return asset_to_dict(db_asset)


@router.delete("/{asset_id}")
async def delete_asset(asset_id: str, db: Session = Depends(get_db)):
    """Soft delete an asset."""
    db_asset = _get_asset(db, asset_id)
    db_asset.is_deleted = True
    db.commit()
    return {"deleted": True, "id": asset_id}
