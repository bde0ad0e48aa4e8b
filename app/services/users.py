# app/services/users.py
from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.core.logging import get_logger
from app.models import User
from app.schemas.user import CreateUserInput, UpdateUserInput, UserOut
from app.utils.timeutil import utcnow

logger = get_logger("services.users")


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    """按 ID 获取用户。"""
    return db.get(User, user_id)


def exists(db: Session, user_id: int) -> bool:
    return get_by_id(db, user_id) is not None


def create_user(db: Session, payload: CreateUserInput) -> UserOut:
    """
    创建用户：
    - 邮箱唯一由数据库约束保证；冲突时抛 ConflictError（"... already exists"）
    - created_at 与 updated_at 取同一时刻
    说明：不在此函数内 commit；调用方负责提交。
    """
    now = utcnow()
    user = User(
        email=str(payload.email),
        name=payload.name,
        preferred_language=payload.preferred_language,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        db.flush()  # 分配 ID，暴露唯一约束
    except IntegrityError as e:
        db.rollback()
        logger.warning("user_create_conflict", email=user.email)
        raise ConflictError(f"User with email {user.email} already exists") from e
    except Exception:
        logger.exception("user_create_failed", email=user.email)
        raise

    logger.info("user_created", user_id=user.id)
    return UserOut.model_validate(user)


def update_user(db: Session, payload: UpdateUserInput) -> UserOut:
    """
    更新用户资料（只更新传入的字段），updated_at 每次都刷新。
    不在此函数内 commit；调用方负责提交。
    """
    user = get_by_id(db, payload.id)
    if not user:
        raise NotFoundError(f"User with id {payload.id} not found")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})
    for field, value in changes.items():
        setattr(user, field, str(value) if field == "email" else value)
    user.updated_at = utcnow()

    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.warning("user_update_conflict", user_id=payload.id)
        raise ConflictError(f"User with email {changes.get('email')} already exists") from e
    except Exception:
        logger.exception("user_update_failed", user_id=payload.id)
        raise

    logger.info("user_updated", user_id=user.id, fields=sorted(changes))
    return UserOut.model_validate(user)


def get_user(db: Session, user_id: int) -> Optional[UserOut]:
    """返回用户；不存在时返回 None（不抛异常）。"""
    user = get_by_id(db, user_id)
    if not user:
        return None
    return UserOut.model_validate(user)
