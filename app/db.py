# app/db.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator

from sqlalchemy import DateTime, create_engine, event
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import settings


# -----------------------------
# Declarative Base
# -----------------------------
class Base(DeclarativeBase):
    pass


# MySQL 的 DATETIME 默认不带小数秒，需显式 fsp=6 才能保留微秒
Timestamp = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


# -----------------------------
# URL 规范化（允许写 mysql://）
# -----------------------------
def _normalize_url(url: str) -> str:
    if url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+pymysql://", 1)
    return url


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_sqlite_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:", "sqlite+pysqlite://", "sqlite+pysqlite:///:memory:")


# -----------------------------
# Engine 配置
# -----------------------------
def _engine_kwargs(url: str) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"future": True, "echo": settings.sqlalchemy_echo}
    if _is_sqlite(url):
        # SQLite 仅用于本地/测试；内存库需要共享同一连接
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_sqlite_memory(url):
            kwargs["poolclass"] = StaticPool
        return kwargs

    kwargs.update(
        pool_pre_ping=True,   # 断线自动探活
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle,  # 1 小时回收
        pool_timeout=settings.db_pool_timeout,
    )
    return kwargs


def _mysql_session_init(dbapi_conn, conn_record):
    with dbapi_conn.cursor() as cur:
        if settings.db_time_zone:
            # 用参数化，避免引号问题
            cur.execute("SET time_zone = %s", (settings.db_time_zone,))
        # 开启严格模式，避免静默截断
        if settings.db_strict_mode:
            cur.execute("SET SESSION sql_mode = 'STRICT_ALL_TABLES'")


def _sqlite_session_init(dbapi_conn, conn_record):
    # SQLite 默认不检查外键
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON")
    finally:
        cur.close()


def build_engine(url: str) -> Engine:
    """按方言创建 Engine，并挂上对应的连接初始化事件。"""
    url = _normalize_url(url)
    eng = create_engine(url, **_engine_kwargs(url))

    if eng.dialect.name == "mysql":
        event.listen(eng, "connect", _mysql_session_init)
    elif eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _sqlite_session_init)
    return eng


engine = build_engine(settings.database_url)


# -----------------------------
# Session 工厂
# -----------------------------
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


# -----------------------------
# FastAPI 依赖 & 脚本工具
# -----------------------------
def get_db() -> Generator[Session, None, None]:
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    db: Session = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
