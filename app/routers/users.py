from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.user import UserCreate, UserResponse
from app.services import users as svc
from app.utils.response import success_response

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=201)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await svc.create_user(db, payload)
    return success_response(data=UserResponse.model_validate(user))


@router.get("/{user_id}")
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await svc.get_user(db, user_id)
    return success_response(data=UserResponse.model_validate(user))
