# app/models/astrology_reading.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base, Timestamp
from app.utils.timeutil import utcnow

if TYPE_CHECKING:
    from .user import User


# NUMERIC(10,7)：经纬度保留 7 位小数（约 1 厘米）
COORDINATE_SCALE = 7
SIGN_MAX_LENGTH = 64


class AstrologyReading(Base):
    """星盘解读；星座/月亮/上升由调用方传入，服务端不做天文计算"""
    __tablename__ = "astrology_readings"

    __table_args__ = (
        Index("ix_astrology_readings_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    birth_date: Mapped[date] = mapped_column(Date, nullable=False, comment="出生日期")
    birth_time: Mapped[str] = mapped_column(Text, nullable=False, comment="出生时间（原样保存，不解析）")
    birth_place: Mapped[str] = mapped_column(Text, nullable=False, comment="出生地")
    birth_latitude: Mapped[Decimal] = mapped_column(Numeric(10, COORDINATE_SCALE), nullable=False)
    birth_longitude: Mapped[Decimal] = mapped_column(Numeric(10, COORDINATE_SCALE), nullable=False)

    reading_text_bengali: Mapped[str] = mapped_column(Text, nullable=False)
    reading_text_hindi: Mapped[str] = mapped_column(Text, nullable=False)
    reading_text_english: Mapped[str] = mapped_column(Text, nullable=False)

    zodiac_sign: Mapped[str] = mapped_column(String(SIGN_MAX_LENGTH), nullable=False)
    moon_sign: Mapped[str] = mapped_column(String(SIGN_MAX_LENGTH), nullable=False)
    rising_sign: Mapped[str] = mapped_column(String(SIGN_MAX_LENGTH), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="astrology_readings")
