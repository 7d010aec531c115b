"""Audit session lifecycle: IN_PROGRESS -> SUBMITTED, nothing else.

``record_item`` and ``submit_session`` for the same session id never run
interleaved inside this process (one ``asyncio.Lock`` per session), and both
read the session row ``FOR UPDATE`` so separate workers on PostgreSQL
serialize the same way. The status flip itself is a conditional UPDATE, so
two submissions can never both win.
"""
import asyncio
import logging
import uuid
import weakref

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.config import settings
from app.models.audit import AuditItem, AuditMedia, AuditSession, SESSION_IN_PROGRESS, ITEM_FAIL, ITEM_PASS
from app.models.project import Project
from app.models.structure import StructureNode
from app.models.template import TemplateAuditPoint
from app.schemas.session import ItemCreate
from app.services.users import get_or_create_auditor
from app.utils.exceptions import ConflictError, EvidenceMissingError, NotFoundError
from app.utils.time import utcnow_iso

logger = logging.getLogger(__name__)

_session_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(session_id: str) -> asyncio.Lock:
    lock = _session_locks.get(session_id)
    if lock is None:
        lock = asyncio.Lock()
        _session_locks[session_id] = lock
    return lock


async def start_session(db: AsyncSession, project_id: str, auditor_id: str | None = None) -> AuditSession:
    project = await db.get(Project, project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found")

    auditor, _ = await get_or_create_auditor(db, auditor_id or settings.default_auditor_id)

    audit_session = AuditSession(
        id=str(uuid.uuid4()),
        project_id=project_id,
        auditor_id=auditor.id,
        status=SESSION_IN_PROGRESS,
        created_at=utcnow_iso(),
        submitted_at=None,
    )
    db.add(audit_session)
    await db.commit()
    await db.refresh(audit_session)
    logger.info("Started audit session %s for project %s by %s", audit_session.id, project_id, auditor.id)
    return audit_session


async def get_session(db: AsyncSession, session_id: str) -> AuditSession:
    audit_session = await db.get(AuditSession, session_id)
    if audit_session is None:
        raise NotFoundError(f"Audit session {session_id} not found")
    return audit_session


async def record_item(db: AsyncSession, payload: ItemCreate) -> AuditItem:
    async with _lock_for(payload.audit_session_id):
        audit_session = await repository.get_session_for_update(db, payload.audit_session_id)
        if audit_session is None:
            raise NotFoundError(f"Audit session {payload.audit_session_id} not found")
        if audit_session.status != SESSION_IN_PROGRESS:
            raise ConflictError(f"Audit session {audit_session.id} is already submitted")

        if await db.get(StructureNode, payload.structure_node_id) is None:
            raise NotFoundError(f"Structure node {payload.structure_node_id} not found")
        if await db.get(TemplateAuditPoint, payload.template_audit_point_id) is None:
            raise NotFoundError(f"Audit point {payload.template_audit_point_id} not found")

        item = AuditItem(
            id=str(uuid.uuid4()),
            audit_session_id=payload.audit_session_id,
            structure_node_id=payload.structure_node_id,
            template_audit_point_id=payload.template_audit_point_id,
            status=payload.status,
            notes=payload.notes or None,
            created_at=utcnow_iso(),
        )
        db.add(item)
        await db.commit()
        await db.refresh(item)
    return item


async def attach_media(db: AsyncSession, item_id: str, storage_key: str) -> AuditMedia:
    item = await db.get(AuditItem, item_id)
    if item is None:
        raise NotFoundError(f"Audit item {item_id} not found")

    media = AuditMedia(
        id=str(uuid.uuid4()),
        audit_item_id=item_id,
        storage_key=storage_key,
        created_at=utcnow_iso(),
    )
    db.add(media)
    await db.commit()
    await db.refresh(media)
    return media


async def submit_session(db: AsyncSession, session_id: str) -> AuditSession:
    async with _lock_for(session_id):
        audit_session = await repository.get_session_for_update(db, session_id)
        if audit_session is None:
            raise NotFoundError(f"Audit session {session_id} not found")
        if audit_session.status != SESSION_IN_PROGRESS:
            raise ConflictError(f"Audit session {session_id} is already submitted")

        missing = await repository.first_fail_item_without_media(db, session_id)
        if missing is not None:
            missing_id = missing.id
            await db.rollback()
            logger.info("Rejected submit of %s: FAIL item %s has no media", session_id, missing_id)
            raise EvidenceMissingError(missing_id)

        if not await repository.mark_session_submitted(db, session_id, utcnow_iso()):
            await db.rollback()
            raise ConflictError(f"Audit session {session_id} is already submitted")
        await db.commit()
        await db.refresh(audit_session)
    logger.info("Submitted audit session %s at %s", session_id, audit_session.submitted_at)
    return audit_session


async def session_summary(db: AsyncSession, session_id: str) -> dict:
    await get_session(db, session_id)
    statuses = await repository.list_session_item_statuses(db, session_id)
    return {
        "total": len(statuses),
        "pass": sum(1 for s in statuses if s == ITEM_PASS),
        "fail": sum(1 for s in statuses if s == ITEM_FAIL),
    }
