from app.models.user import User
from app.models.project import Project
from app.models.structure import StructureNode
from app.models.template import AuditTemplate, TemplateAuditPoint
from app.models.audit import AuditSession, AuditItem, AuditMedia

__all__ = [
    "User",
    "Project",
    "StructureNode",
    "AuditTemplate",
    "TemplateAuditPoint",
    "AuditSession",
    "AuditItem",
    "AuditMedia",
]
