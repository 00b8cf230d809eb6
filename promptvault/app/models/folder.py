from __future__ import annotations

from sqlalchemy import BigInteger, Column, String

from ..db.base import Base


class Folder(Base):
    __tablename__ = "folders"

    id = Column(String(64), primary_key=True)
    name = Column(String(150), nullable=False, default="New Folder")
    icon = Column(String(32), nullable=False, default="📁")
    color = Column(String(32), nullable=False, default="#3B82F6")
    created_at = Column(BigInteger, nullable=False)
