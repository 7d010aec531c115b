from sqlalchemy import Column, String, ForeignKey

from app.database import Base

SESSION_IN_PROGRESS = "IN_PROGRESS"
SESSION_SUBMITTED = "SUBMITTED"

ITEM_PASS = "PASS"
ITEM_FAIL = "FAIL"


class AuditSession(Base):
    __tablename__ = "audit_sessions"

    id = Column(String, primary_key=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    auditor_id = Column(String, ForeignKey("users.id"), nullable=False)
    status = Column(String, nullable=False, default=SESSION_IN_PROGRESS)
    created_at = Column(String, nullable=False)
    submitted_at = Column(String, nullable=True)


class AuditItem(Base):
    """One PASS/FAIL result. Rows are never updated; re-checking appends a new row."""

    __tablename__ = "audit_items"

    id = Column(String, primary_key=True)
    audit_session_id = Column(String, ForeignKey("audit_sessions.id"), nullable=False, index=True)
    structure_node_id = Column(String, ForeignKey("structure_nodes.id"), nullable=False, index=True)
    template_audit_point_id = Column(String, ForeignKey("template_audit_points.id"), nullable=False)
    status = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(String, nullable=False)


class AuditMedia(Base):
    __tablename__ = "audit_media"

    id = Column(String, primary_key=True)
    audit_item_id = Column(String, ForeignKey("audit_items.id"), nullable=False, index=True)
    storage_key = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
