"""Database queries shared by the services.

Every helper takes an ``AsyncSession`` and returns ORM rows or plain result
rows; the tree, checklist, history and defect logic works on those rows and
never touches the session itself.
"""

from typing import Sequence

from sqlalchemy import exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import (
    AuditItem,
    AuditMedia,
    AuditSession,
    ITEM_FAIL,
    SESSION_IN_PROGRESS,
    SESSION_SUBMITTED,
)
from app.models.project import Project
from app.models.structure import StructureNode
from app.models.template import AuditTemplate, TemplateAuditPoint
from app.models.user import User


async def list_projects(db: AsyncSession) -> list[Project]:
    result = await db.execute(select(Project).order_by(Project.created_at))
    return list(result.scalars().all())


async def list_structure_nodes(db: AsyncSession, project_id: str) -> list[StructureNode]:
    # No ORDER BY: children keep the order rows were inserted in.
    result = await db.execute(select(StructureNode).where(StructureNode.project_id == project_id))
    return list(result.scalars().all())


async def get_project_root(db: AsyncSession, project_id: str) -> StructureNode | None:
    result = await db.execute(
        select(StructureNode)
        .where(StructureNode.project_id == project_id, StructureNode.level_type == "PROJECT")
        .limit(1)
    )
    return result.scalars().first()


async def get_template_for_project(db: AsyncSession, project_id: str) -> AuditTemplate | None:
    result = await db.execute(select(AuditTemplate).where(AuditTemplate.project_id == project_id))
    return result.scalars().first()


async def list_template_points(
    db: AsyncSession,
    template_id: str,
    level_type: str | None = None,
) -> list[TemplateAuditPoint]:
    stmt = select(TemplateAuditPoint).where(TemplateAuditPoint.template_id == template_id)
    if level_type is not None:
        stmt = stmt.where(TemplateAuditPoint.applicable_level_type == level_type)
    result = await db.execute(stmt.order_by(TemplateAuditPoint.order_index))
    return list(result.scalars().all())


async def get_session_for_update(db: AsyncSession, session_id: str) -> AuditSession | None:
    """Load a session row locked against concurrent writers (a no-op on SQLite)."""
    result = await db.execute(
        select(AuditSession)
        .where(AuditSession.id == session_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_session_item_statuses(db: AsyncSession, session_id: str) -> list[str]:
    result = await db.execute(
        select(AuditItem.status).where(AuditItem.audit_session_id == session_id)
    )
    return list(result.scalars().all())


async def first_fail_item_without_media(db: AsyncSession, session_id: str) -> AuditItem | None:
    has_media = exists().where(AuditMedia.audit_item_id == AuditItem.id)
    result = await db.execute(
        select(AuditItem)
        .where(
            AuditItem.audit_session_id == session_id,
            AuditItem.status == ITEM_FAIL,
            ~has_media,
        )
        .order_by(AuditItem.created_at, AuditItem.id)
        .limit(1)
    )
    return result.scalars().first()


async def mark_session_submitted(db: AsyncSession, session_id: str, submitted_at: str) -> bool:
    """Flip IN_PROGRESS to SUBMITTED; False when another writer got there first."""
    result = await db.execute(
        update(AuditSession)
        .where(AuditSession.id == session_id, AuditSession.status == SESSION_IN_PROGRESS)
        .values(status=SESSION_SUBMITTED, submitted_at=submitted_at)
    )
    return result.rowcount == 1


async def list_node_history(
    db: AsyncSession,
    project_id: str,
    node_id: str,
    point_ids: Sequence[str],
    exclude_session_id: str | None = None,
):
    """Items recorded against ``node_id`` in the project, with the auditor who recorded them."""
    if not point_ids:
        return []
    stmt = (
        select(
            AuditItem.id.label("item_id"),
            AuditItem.template_audit_point_id,
            AuditItem.status,
            AuditItem.notes,
            AuditItem.created_at,
            AuditSession.auditor_id,
            User.name.label("auditor_name"),
        )
        .join(AuditSession, AuditItem.audit_session_id == AuditSession.id)
        .join(User, AuditSession.auditor_id == User.id)
        .where(
            AuditItem.structure_node_id == node_id,
            AuditItem.template_audit_point_id.in_(point_ids),
            AuditSession.project_id == project_id,
        )
        .order_by(AuditItem.created_at, AuditItem.id)
    )
    if exclude_session_id is not None:
        stmt = stmt.where(AuditSession.id != exclude_session_id)
    result = await db.execute(stmt)
    return result.all()


async def item_ids_with_media(db: AsyncSession, item_ids: Sequence[str]) -> set[str]:
    if not item_ids:
        return set()
    result = await db.execute(
        select(AuditMedia.audit_item_id).where(AuditMedia.audit_item_id.in_(item_ids)).distinct()
    )
    return set(result.scalars().all())


async def count_sessions_by_project(db: AsyncSession) -> dict[str, int]:
    result = await db.execute(
        select(AuditSession.project_id, func.count(AuditSession.id)).group_by(AuditSession.project_id)
    )
    return {project_id: count for project_id, count in result.all()}


async def list_item_outcomes(db: AsyncSession):
    """(project_id, status, severity) for every recorded item."""
    result = await db.execute(
        select(
            AuditSession.project_id,
            AuditItem.status,
            TemplateAuditPoint.severity,
        )
        .join(AuditSession, AuditItem.audit_session_id == AuditSession.id)
        .join(TemplateAuditPoint, AuditItem.template_audit_point_id == TemplateAuditPoint.id)
    )
    return result.all()


async def list_defect_rows(db: AsyncSession, project_id: str | None = None):
    """FAIL items joined with everything a defect listing shows."""
    stmt = (
        select(
            AuditItem.id,
            AuditItem.notes,
            AuditItem.created_at,
            Project.id.label("project_id"),
            Project.name.label("project_name"),
            StructureNode.id.label("node_id"),
            StructureNode.name.label("node_name"),
            StructureNode.level_type.label("node_level"),
            TemplateAuditPoint.name.label("audit_point_name"),
            TemplateAuditPoint.severity,
            User.name.label("auditor_name"),
        )
        .join(AuditSession, AuditItem.audit_session_id == AuditSession.id)
        .join(Project, AuditSession.project_id == Project.id)
        .join(StructureNode, AuditItem.structure_node_id == StructureNode.id)
        .join(TemplateAuditPoint, AuditItem.template_audit_point_id == TemplateAuditPoint.id)
        .outerjoin(User, AuditSession.auditor_id == User.id)
        .where(AuditItem.status == ITEM_FAIL)
    )
    if project_id is not None:
        stmt = stmt.where(AuditSession.project_id == project_id)
    result = await db.execute(stmt)
    return result.all()
