from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON

from permtree.db.base import Base


class RoleRow(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    permissions = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
