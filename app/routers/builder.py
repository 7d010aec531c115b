from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services import defects as svc
from app.utils.response import success_response

router = APIRouter(prefix="/builder", tags=["builder"])


@router.get("/projects")
async def project_summaries(db: AsyncSession = Depends(get_db)):
    return success_response(data=await svc.project_summaries(db))


@router.get("/projects/{project_id}/defects")
async def project_defects(project_id: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=await svc.project_defects(db, project_id))


@router.get("/defects")
async def all_defects(db: AsyncSession = Depends(get_db)):
    return success_response(data=await svc.all_defects(db))
