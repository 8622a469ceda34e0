"""Reflection model: append-only journal entry, optionally tied to a realm."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.db.session import Base


class Reflection(Base):
    __tablename__ = "reflections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    realm_id = Column(String(32), nullable=True)  # null = general journal entry
    content = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="reflections")
