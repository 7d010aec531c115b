from sqlalchemy import Column, String

from app.database import Base

ROLE_BUILDER = "BUILDER"
ROLE_AUDITOR = "AUDITOR"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    role = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
