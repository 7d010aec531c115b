import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.project import Project
from app.models.structure import StructureNode
from app.models.template import AuditTemplate, TemplateAuditPoint
from app.models.user import User
from app.utils.time import utcnow_iso


def _seed_id(name: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, name))


SEED_BUILDER_ID = _seed_id("user-builder-1")
SEED_AUDITOR_ID = _seed_id("user-auditor-1")
SEED_PROJECT_ID = _seed_id("project-sunrise-residency")
SEED_TEMPLATE_ID = _seed_id("template-sunrise-standard")

SEED_USERS = [
    {"id": SEED_BUILDER_ID, "name": "Builder One", "phone": "1000000000", "role": "BUILDER"},
    {"id": SEED_AUDITOR_ID, "name": "Auditor One", "phone": "2000000000", "role": "AUDITOR"},
]

# PROJECT -> BLOCK -> FLOOR -> UNIT -> ROOM, parents listed before children.
SEED_NODES = [
    {"id": _seed_id("node-project-1"), "parent_id": None, "level_type": "PROJECT", "name": "Sunrise Residency", "order_index": 0},
    {"id": _seed_id("node-block-a"), "parent_id": _seed_id("node-project-1"), "level_type": "BLOCK", "name": "Block A", "order_index": 1},
    {"id": _seed_id("node-floor-1"), "parent_id": _seed_id("node-block-a"), "level_type": "FLOOR", "name": "Floor 1", "order_index": 1},
    {"id": _seed_id("node-unit-101"), "parent_id": _seed_id("node-floor-1"), "level_type": "UNIT", "name": "Unit 101", "order_index": 1},
    {"id": _seed_id("node-room-101-kitchen"), "parent_id": _seed_id("node-unit-101"), "level_type": "ROOM", "name": "Kitchen", "order_index": 1},
    {"id": _seed_id("node-room-101-bedroom"), "parent_id": _seed_id("node-unit-101"), "level_type": "ROOM", "name": "Bedroom", "order_index": 2},
]

SEED_POINTS = [
    {"id": _seed_id("pt-room-clean"), "applicable_level_type": "ROOM", "name": "Room Cleanliness", "is_mandatory": True, "severity": "LOW", "order_index": 1},
    {"id": _seed_id("pt-room-tiles"), "applicable_level_type": "ROOM", "name": "Tiles Alignment", "is_mandatory": True, "severity": "MEDIUM", "order_index": 2},
    {"id": _seed_id("pt-room-water"), "applicable_level_type": "ROOM", "name": "Water Leakage", "is_mandatory": False, "severity": "HIGH", "order_index": 3},
    {"id": _seed_id("pt-unit-doors"), "applicable_level_type": "UNIT", "name": "Door Fittings", "is_mandatory": True, "severity": "MEDIUM", "order_index": 1},
    {"id": _seed_id("pt-unit-paint"), "applicable_level_type": "UNIT", "name": "Paint Quality", "is_mandatory": False, "severity": "LOW", "order_index": 2},
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(Project).limit(1))
    if result.scalars().first() is not None:
        return

    now = utcnow_iso()
    for u in SEED_USERS:
        session.add(User(**u, created_at=now))

    session.add(Project(id=SEED_PROJECT_ID, name="Sunrise Residency", location="Sector 15", created_at=now))
    await session.flush()

    for n in SEED_NODES:
        session.add(StructureNode(**n, project_id=SEED_PROJECT_ID))
        await session.flush()

    session.add(AuditTemplate(id=SEED_TEMPLATE_ID, project_id=SEED_PROJECT_ID, name="Standard Quality Template"))
    await session.flush()
    for p in SEED_POINTS:
        session.add(TemplateAuditPoint(**p, template_id=SEED_TEMPLATE_ID))

    await session.commit()
