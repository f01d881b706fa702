from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from permtree.db.base import Base


class ResourceRow(Base):
    __tablename__ = "resources"
    __table_args__ = (
        UniqueConstraint("parent_id", "key", name="uq_resources_parent_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    parent_id = Column(Integer, ForeignKey("resources.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    parent = relationship("ResourceRow", remote_side=[id], back_populates="sub_resources")
    sub_resources = relationship(
        "ResourceRow",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="ResourceRow.id",
    )
    actions = relationship(
        "ActionRow",
        back_populates="resource",
        cascade="all, delete-orphan",
        order_by="ActionRow.id",
    )
