from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from permtree.db.base import Base


class ActionRow(Base):
    __tablename__ = "actions"
    __table_args__ = (
        UniqueConstraint("resource_id", "key", name="uq_actions_resource_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    resource_id = Column(Integer, ForeignKey("resources.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    resource = relationship("ResourceRow", back_populates="actions")
