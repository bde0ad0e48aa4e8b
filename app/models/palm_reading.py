# app/models/palm_reading.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base, Timestamp
from app.utils.timeutil import utcnow

if TYPE_CHECKING:
    from .user import User


# NUMERIC(3,2)：0.00 ~ 9.99，业务上限制在 [0, 1]
CONFIDENCE_SCALE = 2


class PalmReading(Base):
    """手相解读（上传后不可修改）"""
    __tablename__ = "palm_readings"

    __table_args__ = (
        Index("ix_palm_readings_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False, comment="图片地址")
    reading_text_bengali: Mapped[str] = mapped_column(Text, nullable=False)
    reading_text_hindi: Mapped[str] = mapped_column(Text, nullable=False)
    reading_text_english: Mapped[str] = mapped_column(Text, nullable=False)
    confidence_score: Mapped[Decimal] = mapped_column(
        Numeric(3, CONFIDENCE_SCALE), nullable=False, comment="置信度 [0, 1]"
    )
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="palm_readings")
