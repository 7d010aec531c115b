"""Builder-facing aggregates: per-project summaries and defect listings.

Everything is recomputed from the tables on each call.
"""
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.models.audit import ITEM_FAIL
from app.schemas.project import ProjectResponse
from app.services.projects import get_project

SEVERITY_RANK = {"HIGH": 0, "MEDIUM": 1, "LOW": 2}


def summarize(session_count: int, outcomes: Iterable) -> dict:
    """``outcomes`` are rows with ``status`` and ``severity`` (the point's)."""
    total = 0
    defects = 0
    critical = 0
    for row in outcomes:
        total += 1
        if row.status == ITEM_FAIL:
            defects += 1
            if row.severity == "HIGH":
                critical += 1
    pass_rate = 100 * (total - defects) / total if total else 0.0
    return {
        "total_audits": session_count,
        "total_defects": defects,
        "pass_rate": pass_rate,
        "critical_defects": critical,
    }


def sort_defects(defects: list[dict]) -> list[dict]:
    """HIGH before MEDIUM before LOW; newest first within a severity."""
    ordered = sorted(defects, key=lambda d: d["audit_date"], reverse=True)
    ordered.sort(key=lambda d: SEVERITY_RANK.get(d["severity"], len(SEVERITY_RANK)))
    return ordered


def _defect(row, media_item_ids: set[str]) -> dict:
    return {
        "id": row.id,
        "project_id": row.project_id,
        "project_name": row.project_name,
        "node_id": row.node_id,
        "node_name": row.node_name,
        "node_level": row.node_level,
        "audit_point_name": row.audit_point_name,
        "severity": row.severity,
        "notes": row.notes or "",
        "auditor_name": row.auditor_name or "Unknown",
        "audit_date": row.created_at,
        "has_photo": row.id in media_item_ids,
    }


async def _load_defects(db: AsyncSession, project_id: str | None = None) -> list[dict]:
    rows = await repository.list_defect_rows(db, project_id)
    media_item_ids = await repository.item_ids_with_media(db, [row.id for row in rows])
    return sort_defects([_defect(row, media_item_ids) for row in rows])


async def project_summaries(db: AsyncSession) -> list[dict]:
    projects = await repository.list_projects(db)
    session_counts = await repository.count_sessions_by_project(db)
    outcomes_by_project: dict[str, list] = {}
    for row in await repository.list_item_outcomes(db):
        outcomes_by_project.setdefault(row.project_id, []).append(row)

    return [
        {
            **ProjectResponse.model_validate(p).model_dump(),
            "summary": summarize(session_counts.get(p.id, 0), outcomes_by_project.get(p.id, [])),
        }
        for p in projects
    ]


async def project_defects(db: AsyncSession, project_id: str) -> dict:
    project = await get_project(db, project_id)
    return {"project_name": project.name, "defects": await _load_defects(db, project_id)}


async def all_defects(db: AsyncSession) -> dict:
    return {"defects": await _load_defects(db)}
