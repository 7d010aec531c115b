from sqlalchemy import Column, String, Integer, ForeignKey

from app.database import Base

# Coarsest first; a node's parent is always the level just before its own.
LEVEL_TYPES = ("PROJECT", "BLOCK", "FLOOR", "UNIT", "ROOM")
AUDITABLE_LEVELS = frozenset({"UNIT", "ROOM"})


class StructureNode(Base):
    __tablename__ = "structure_nodes"

    id = Column(String, primary_key=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    parent_id = Column(String, ForeignKey("structure_nodes.id"), nullable=True)
    level_type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
