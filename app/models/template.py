from sqlalchemy import Column, String, Integer, Boolean, ForeignKey

from app.database import Base

SEVERITIES = ("LOW", "MEDIUM", "HIGH")


class AuditTemplate(Base):
    __tablename__ = "audit_templates"

    id = Column(String, primary_key=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, unique=True)
    name = Column(String, nullable=False)


class TemplateAuditPoint(Base):
    __tablename__ = "template_audit_points"

    id = Column(String, primary_key=True)
    template_id = Column(String, ForeignKey("audit_templates.id"), nullable=False, index=True)
    applicable_level_type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    is_mandatory = Column(Boolean, nullable=False, default=False)
    severity = Column(String, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
