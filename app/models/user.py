from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import (
    Enum,
    Integer,
    String,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base, Timestamp
from app.utils.timeutil import utcnow

if TYPE_CHECKING:
    from .palm_reading import PalmReading
    from .astrology_reading import AstrologyReading


LANGUAGES = ("bengali", "hindi", "english")
NAME_MAX_LENGTH = 128

# PostgreSQL 下建为名为 language 的 ENUM TYPE；MySQL 为列级 ENUM
language_enum = Enum(*LANGUAGES, name="language")


class User(Base):
    """
    用户表
    - 邮箱唯一（数据库约束，重复插入直接失败）
    - preferred_language 决定前端默认展示哪种语言
    - 不做删除
    """
    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_created_at", "created_at"),
    )

    # === 主键 ===
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        comment="主键ID（自增）"
    )

    email: Mapped[str] = mapped_column(
        String(254),
        nullable=False,
        comment="邮箱；唯一约束见 uq_users_email"
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        comment="姓名/昵称"
    )

    preferred_language: Mapped[str] = mapped_column(
        language_enum,
        nullable=False,
        default="english",
        server_default="english",
        comment="首选语言：bengali / hindi / english"
    )

    # === 时间信息（应用层写入，保留微秒） ===
    created_at: Mapped[datetime] = mapped_column(
        Timestamp,
        default=utcnow,
        nullable=False,
        comment="创建时间"
    )

    updated_at: Mapped[datetime] = mapped_column(
        Timestamp,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="更新时间（每次资料变更都会刷新）"
    )

    # === 关联关系（便于反查；不级联删除） ===
    palm_readings: Mapped[List["PalmReading"]] = relationship(
        back_populates="user",
        doc="用户的手相解读记录"
    )

    astrology_readings: Mapped[List["AstrologyReading"]] = relationship(
        back_populates="user",
        doc="用户的星盘解读记录"
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} lang={self.preferred_language}>"
