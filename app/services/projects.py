import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.models.project import Project
from app.models.structure import StructureNode, LEVEL_TYPES
from app.models.template import AuditTemplate, TemplateAuditPoint
from app.schemas.project import NodeCreate, PointCreate, PointResponse, ProjectCreate, TemplateResponse
from app.services.checklist import checklist_with_history
from app.services.structure import build_breadcrumb, build_tree
from app.utils.exceptions import ConflictError, InputError, NotFoundError
from app.utils.time import utcnow_iso

logger = logging.getLogger(__name__)


async def get_project(db: AsyncSession, project_id: str) -> Project:
    project = await db.get(Project, project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found")
    return project


async def list_projects(db: AsyncSession) -> list[Project]:
    return await repository.list_projects(db)


async def create_project(db: AsyncSession, payload: ProjectCreate) -> Project:
    project = Project(
        id=str(uuid.uuid4()),
        name=payload.name,
        location=payload.location,
        created_at=utcnow_iso(),
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info("Created project %s (%s)", project.id, project.name)
    return project


async def create_node(db: AsyncSession, project_id: str, payload: NodeCreate) -> StructureNode:
    await get_project(db, project_id)

    if payload.level_type == "PROJECT":
        if payload.parent_id is not None:
            raise InputError("A PROJECT node cannot have a parent")
        if await repository.get_project_root(db, project_id) is not None:
            raise ConflictError(f"Project {project_id} already has a root node")
    else:
        if payload.parent_id is None:
            raise InputError(f"A {payload.level_type} node needs a parent")
        parent = await db.get(StructureNode, payload.parent_id)
        if parent is None or parent.project_id != project_id:
            raise NotFoundError(f"Parent node {payload.parent_id} not found in project {project_id}")
        expected = LEVEL_TYPES[LEVEL_TYPES.index(payload.level_type) - 1]
        if parent.level_type != expected:
            raise InputError(
                f"A {payload.level_type} node must sit under a {expected}, not a {parent.level_type}"
            )

    node = StructureNode(
        id=str(uuid.uuid4()),
        project_id=project_id,
        parent_id=payload.parent_id,
        level_type=payload.level_type,
        name=payload.name,
        order_index=payload.order_index,
    )
    db.add(node)
    await db.commit()
    await db.refresh(node)
    return node


async def create_template(db: AsyncSession, project_id: str, name: str) -> AuditTemplate:
    await get_project(db, project_id)
    if await repository.get_template_for_project(db, project_id) is not None:
        raise ConflictError(f"Project {project_id} already has an audit template")

    template = AuditTemplate(id=str(uuid.uuid4()), project_id=project_id, name=name)
    db.add(template)
    await db.commit()
    await db.refresh(template)
    return template


async def _require_template(db: AsyncSession, project_id: str) -> AuditTemplate:
    await get_project(db, project_id)
    template = await repository.get_template_for_project(db, project_id)
    if template is None:
        raise NotFoundError(f"Audit template not found for project {project_id}")
    return template


async def get_template(db: AsyncSession, project_id: str) -> TemplateResponse:
    template = await _require_template(db, project_id)
    points = await repository.list_template_points(db, template.id)
    return TemplateResponse(
        id=template.id,
        project_id=template.project_id,
        name=template.name,
        points=[PointResponse.model_validate(p) for p in points],
    )


async def add_point(db: AsyncSession, project_id: str, payload: PointCreate) -> TemplateAuditPoint:
    template = await _require_template(db, project_id)
    point = TemplateAuditPoint(
        id=str(uuid.uuid4()),
        template_id=template.id,
        **payload.model_dump(),
    )
    db.add(point)
    await db.commit()
    await db.refresh(point)
    return point


async def get_structure(
    db: AsyncSession,
    project_id: str,
    node_id: str | None = None,
    include_history: bool = True,
    exclude_session_id: str | None = None,
) -> dict | None:
    """Whole tree when ``node_id`` is None, otherwise one node with its checklist and breadcrumb."""
    await get_project(db, project_id)
    rows = await repository.list_structure_nodes(db, project_id)
    tree = build_tree(rows)

    if node_id is None:
        return tree.to_dict()

    if node_id not in tree.nodes:
        raise NotFoundError(f"Structure node {node_id} not found in project {project_id}")

    node = tree.nodes[node_id]
    audit_points = await checklist_with_history(
        db,
        project_id,
        node,
        include_history=include_history,
        exclude_session_id=exclude_session_id,
    )
    return {
        "node": tree.to_dict(node_id),
        "audit_points": audit_points,
        "breadcrumb": build_breadcrumb(rows, node_id),
    }
