from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.models.audit import AuditSession
from app.models.structure import StructureNode
from app.models.template import TemplateAuditPoint
from app.schemas.project import PointResponse
from app.services.history import load_history, merge_history
from app.services.structure import is_auditable
from app.utils.exceptions import NotFoundError


def filter_points(points: Iterable, level_type: str) -> list:
    """Points that apply to ``level_type``; containers (PROJECT/BLOCK/FLOOR) get none."""
    if not is_auditable(level_type):
        return []
    matching = [p for p in points if p.applicable_level_type == level_type]
    return sorted(matching, key=lambda p: p.order_index or 0)


async def resolve_checklist(db: AsyncSession, project_id: str, node) -> list[TemplateAuditPoint]:
    template = await repository.get_template_for_project(db, project_id)
    if template is None:
        raise NotFoundError(f"Audit template not found for project {project_id}")
    if not is_auditable(node.level_type):
        return []
    points = await repository.list_template_points(db, template.id, level_type=node.level_type)
    return filter_points(points, node.level_type)


async def checklist_with_history(
    db: AsyncSession,
    project_id: str,
    node,
    include_history: bool,
    exclude_session_id: str | None = None,
) -> list[dict]:
    points = await resolve_checklist(db, project_id, node)
    data = [PointResponse.model_validate(p).model_dump() for p in points]
    if not include_history:
        return data
    history = await load_history(
        db, project_id, node.id, [p.id for p in points], exclude_session_id=exclude_session_id
    )
    return merge_history(data, history)


async def session_checklist(
    db: AsyncSession,
    session_id: str,
    node_id: str,
    include_history: bool = False,
) -> dict:
    audit_session = await db.get(AuditSession, session_id)
    if audit_session is None:
        raise NotFoundError(f"Audit session {session_id} not found")

    node = await db.get(StructureNode, node_id)
    if node is None or node.project_id != audit_session.project_id:
        raise NotFoundError(f"Structure node {node_id} not found in project {audit_session.project_id}")

    audit_points = await checklist_with_history(
        db,
        audit_session.project_id,
        node,
        include_history=include_history,
        exclude_session_id=session_id,
    )
    return {"node_name": node.name, "audit_points": audit_points}
