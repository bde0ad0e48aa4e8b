# app/services/translations.py
"""
界面文案

create_translation 按 key 做 upsert：
- MySQL / PostgreSQL / SQLite 用数据库原生的 insert ... on conflict/duplicate key update，单条语句完成
- 其它方言退化为先查再插/改（并发写同一个 key 时存在竞争）
"""
from __future__ import annotations

from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models import Translation
from app.schemas.common import DEFAULT_LANGUAGE
from app.schemas.translation import CreateTranslationInput, GetTranslationsInput, TranslationOut
from app.utils.timeutil import utcnow

logger = get_logger("services.translations")

TEXT_COLUMNS = {
    "bengali": "text_bengali",
    "hindi": "text_hindi",
    "english": "text_english",
}


def get_by_key(db: Session, key: str) -> Optional[Translation]:
    stmt = (
        select(Translation)
        .where(Translation.key == key)
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalars().first()


def _native_upsert_stmt(dialect: str, values: dict):
    """返回方言对应的 upsert 语句；不支持时返回 None"""
    update_cols = ("text_bengali", "text_hindi", "text_english", "updated_at")

    if dialect == "mysql":
        from sqlalchemy.dialects.mysql import insert as mysql_insert

        stmt = mysql_insert(Translation).values(**values)
        return stmt.on_duplicate_key_update(
            **{c: stmt.inserted[c] for c in update_cols}
        )

    if dialect in ("postgresql", "sqlite"):
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert as dialect_insert
        else:
            from sqlalchemy.dialects.sqlite import insert as dialect_insert

        stmt = dialect_insert(Translation).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[Translation.key],
            set_={c: stmt.excluded[c] for c in update_cols},
        )

    return None


def _select_then_write(db: Session, values: dict) -> None:
    existing = get_by_key(db, values["key"])
    if existing:
        existing.text_bengali = values["text_bengali"]
        existing.text_hindi = values["text_hindi"]
        existing.text_english = values["text_english"]
        existing.updated_at = values["updated_at"]
    else:
        db.add(Translation(**values))
    db.flush()


def create_translation(db: Session, payload: CreateTranslationInput) -> TranslationOut:
    """
    新建或更新文案（按 key）
    - 已存在：覆盖三种语言文本并刷新 updated_at，created_at 不变
    - 不存在：插入
    不在此函数内 commit；调用方负责提交。
    """
    now = utcnow()
    values = payload.model_dump()
    values.update(created_at=now, updated_at=now)

    try:
        stmt = _native_upsert_stmt(db.get_bind().dialect.name, values)
        if stmt is not None:
            db.execute(stmt)
        else:
            _select_then_write(db, values)
        row = get_by_key(db, payload.key)
    except Exception:
        logger.exception("translation_upsert_failed", key=payload.key)
        raise

    logger.info("translation_upserted", key=row.key, translation_id=row.id)
    return TranslationOut.model_validate(row)


def get_translations(db: Session, payload: GetTranslationsInput) -> Dict[str, str]:
    """
    返回 {key: 指定语言文本}
    - keys 非空时只查这些 key；查不到的 key 不出现在结果里
    - 语言无法识别时回退为英文
    """
    stmt = select(Translation)
    if payload.keys:
        stmt = stmt.where(Translation.key.in_(payload.keys))

    try:
        rows = db.execute(stmt).scalars().all()
    except Exception:
        logger.exception("translations_fetch_failed", language=payload.language)
        raise

    column = TEXT_COLUMNS.get(payload.language, TEXT_COLUMNS[DEFAULT_LANGUAGE])
    return {row.key: getattr(row, column) for row in rows}
