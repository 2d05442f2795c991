"""
bytevault.db.models

Persistence schema for the object index.

Responsibilities:
- Define `StoredObject`, the indexed record of an uploaded blob.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from bytevault.db.base import Base


class StoredObject(Base):
    __tablename__ = "stored_objects"

    # Derived `<marker>-<basename>`; also the blob's filename under storage_dir.
    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    marker: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)

    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Naive UTC timestamps.
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    modified_at: Mapped[datetime] = mapped_column(nullable=False)


# --- Module Notes -----------------------------------------------------------
# Rows are immutable after insert; delete is the only other write.
