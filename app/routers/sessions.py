from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.session import SessionCreate, SessionResponse, SubmitResponse
from app.services import audit_sessions as svc
from app.services.checklist import session_checklist
from app.utils.response import success_response

router = APIRouter(prefix="/audit-sessions", tags=["audit-sessions"])


@router.post("", status_code=201)
async def create_session(payload: SessionCreate, db: AsyncSession = Depends(get_db)):
    audit_session = await svc.start_session(db, payload.project_id, payload.auditor_id)
    return success_response(data=SessionResponse.model_validate(audit_session))


@router.get("/{session_id}")
async def get_session(session_id: str, db: AsyncSession = Depends(get_db)):
    audit_session = await svc.get_session(db, session_id)
    return success_response(data=SessionResponse.model_validate(audit_session))


@router.get("/{session_id}/checklist/{node_id}")
async def get_checklist(
    session_id: str,
    node_id: str,
    include_history: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    data = await session_checklist(db, session_id, node_id, include_history=include_history)
    return success_response(data=data)


@router.post("/{session_id}/submit")
async def submit_session(session_id: str, db: AsyncSession = Depends(get_db)):
    audit_session = await svc.submit_session(db, session_id)
    data = SubmitResponse(session_id=audit_session.id, submitted_at=audit_session.submitted_at)
    return success_response(data=data)


@router.get("/{session_id}/summary")
async def get_summary(session_id: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=await svc.session_summary(db, session_id))
