"""Attach earlier audit results to each checklist point of a node."""
from dataclasses import asdict, dataclass
from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository


@dataclass
class HistoryEntry:
    item_id: str
    status: str
    notes: str | None
    created_at: str
    auditor_id: str
    auditor_name: str
    has_media: bool


def group_history(rows: Iterable, media_item_ids: set[str]) -> dict[str, list[HistoryEntry]]:
    """Bucket history rows by checklist point, oldest first within each bucket."""
    by_point: dict[str, list[HistoryEntry]] = {}
    for row in rows:
        entry = HistoryEntry(
            item_id=row.item_id,
            status=row.status,
            notes=row.notes,
            created_at=row.created_at,
            auditor_id=row.auditor_id,
            auditor_name=row.auditor_name,
            has_media=row.item_id in media_item_ids,
        )
        by_point.setdefault(row.template_audit_point_id, []).append(entry)
    for entries in by_point.values():
        entries.sort(key=lambda e: e.created_at)
    return by_point


def merge_history(points: Sequence[dict], history_by_point: dict[str, list[HistoryEntry]]) -> list[dict]:
    return [
        {**point, "history": [asdict(entry) for entry in history_by_point.get(point["id"], [])]}
        for point in points
    ]


async def load_history(
    db: AsyncSession,
    project_id: str,
    node_id: str,
    point_ids: Sequence[str],
    exclude_session_id: str | None = None,
) -> dict[str, list[HistoryEntry]]:
    rows = await repository.list_node_history(db, project_id, node_id, point_ids, exclude_session_id)
    media_item_ids = await repository.item_ids_with_media(db, [row.item_id for row in rows])
    return group_history(rows, media_item_ids)
