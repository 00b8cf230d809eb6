from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Column, String, Text

from ..db.base import Base


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False, default="New Prompt")
    content = Column(Text, nullable=False, default="")
    tags = Column(Text, nullable=False, default="[]")
    is_favorite = Column(Boolean, nullable=False, default=False)
    is_pinned = Column(Boolean, nullable=False, default=False)
    # Not a foreign key; deleting a folder detaches its prompts in the service layer.
    folder_id = Column(String(64), nullable=True, index=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)
    versions = Column(Text, nullable=False, default="[]")
