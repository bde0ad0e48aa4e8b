from __future__ import annotations

from datetime import datetime

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base, Timestamp
from app.utils.timeutil import utcnow

# utf8mb4 下唯一索引的 VARCHAR 上限
KEY_MAX_LENGTH = 191


class Translation(Base):
    """
    界面文案字典
    - 按 key 唯一；同 key 再次写入即更新（upsert）
    - 与用户无关
    """
    __tablename__ = "translations"

    __table_args__ = (
        UniqueConstraint("key", name="uq_translations_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, comment="主键ID")
    key: Mapped[str] = mapped_column(String(KEY_MAX_LENGTH), nullable=False, comment="文案键")
    text_bengali: Mapped[str] = mapped_column(Text, nullable=False)
    text_hindi: Mapped[str] = mapped_column(Text, nullable=False)
    text_english: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        Timestamp, default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Translation id={self.id} key={self.key!r}>"
