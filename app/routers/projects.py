from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.project import (
    NodeCreate,
    NodeResponse,
    PointCreate,
    PointResponse,
    ProjectCreate,
    ProjectResponse,
    TemplateCreate,
    TemplateResponse,
)
from app.services import projects as svc
from app.utils.response import success_response

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
async def list_projects(db: AsyncSession = Depends(get_db)):
    projects = await svc.list_projects(db)
    return success_response(data=[ProjectResponse.model_validate(p) for p in projects])


@router.post("", status_code=201)
async def create_project(payload: ProjectCreate, db: AsyncSession = Depends(get_db)):
    project = await svc.create_project(db, payload)
    return success_response(data=ProjectResponse.model_validate(project))


@router.get("/{project_id}")
async def get_project(project_id: str, db: AsyncSession = Depends(get_db)):
    project = await svc.get_project(db, project_id)
    return success_response(data=ProjectResponse.model_validate(project))


@router.post("/{project_id}/nodes", status_code=201)
async def create_node(project_id: str, payload: NodeCreate, db: AsyncSession = Depends(get_db)):
    node = await svc.create_node(db, project_id, payload)
    return success_response(data=NodeResponse.model_validate(node))


@router.get("/{project_id}/structure")
async def get_structure(
    project_id: str,
    node_id: str | None = Query(None),
    include_history: bool = Query(True),
    session_id: str | None = Query(None, description="Leave this session's own items out of the history"),
    db: AsyncSession = Depends(get_db),
):
    data = await svc.get_structure(
        db,
        project_id,
        node_id=node_id,
        include_history=include_history,
        exclude_session_id=session_id,
    )
    return success_response(data=data)


@router.post("/{project_id}/template", status_code=201)
async def create_template(project_id: str, payload: TemplateCreate, db: AsyncSession = Depends(get_db)):
    template = await svc.create_template(db, project_id, payload.name)
    return success_response(data=TemplateResponse.model_validate(template))


@router.get("/{project_id}/template")
async def get_template(project_id: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=await svc.get_template(db, project_id))


@router.post("/{project_id}/template/points", status_code=201)
async def add_point(project_id: str, payload: PointCreate, db: AsyncSession = Depends(get_db)):
    point = await svc.add_point(db, project_id, payload)
    return success_response(data=PointResponse.model_validate(point))
