from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.session import ItemCreate, ItemResponse, MediaCreate, MediaResponse
from app.services import audit_sessions as svc
from app.utils.response import success_response

router = APIRouter(prefix="/audit-items", tags=["audit-items"])


@router.post("", status_code=201)
async def record_item(payload: ItemCreate, db: AsyncSession = Depends(get_db)):
    item = await svc.record_item(db, payload)
    return success_response(data=ItemResponse.model_validate(item))


@router.post("/{item_id}/media", status_code=201)
async def attach_media(item_id: str, payload: MediaCreate, db: AsyncSession = Depends(get_db)):
    media = await svc.attach_media(db, item_id, payload.storage_key)
    return success_response(data=MediaResponse.model_validate(media))
