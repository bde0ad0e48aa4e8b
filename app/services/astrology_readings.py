# app/services/astrology_readings.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.models.astrology_reading import COORDINATE_SCALE, AstrologyReading
from app.schemas.reading import (
    AstrologyReadingOut,
    CreateAstrologyReadingInput,
    GetReadingByIdInput,
    GetUserReadingsInput,
)
from app.services import users as user_service
from app.utils.numeric import to_decimal

logger = get_logger("services.astrology_readings")


def create_astrology_reading(db: Session, payload: CreateAstrologyReadingInput) -> AstrologyReadingOut:
    """原样保存调用方提供的星盘数据（不做天文计算）"""
    if not user_service.exists(db, payload.user_id):
        raise NotFoundError(f"User with id {payload.user_id} does not exist")

    data = payload.model_dump()
    data["birth_latitude"] = to_decimal(payload.birth_latitude, COORDINATE_SCALE)
    data["birth_longitude"] = to_decimal(payload.birth_longitude, COORDINATE_SCALE)

    reading = AstrologyReading(**data)
    db.add(reading)
    try:
        db.flush()
    except Exception:
        logger.exception("astrology_reading_create_failed", user_id=payload.user_id)
        raise

    logger.info("astrology_reading_created", reading_id=reading.id, user_id=reading.user_id)
    return AstrologyReadingOut.model_validate(reading)


def get_user_astrology_readings(db: Session, payload: GetUserReadingsInput) -> List[AstrologyReadingOut]:
    """用户的全部星盘解读，最新的在前"""
    readings = db.query(AstrologyReading).filter(
        AstrologyReading.user_id == payload.user_id
    ).order_by(AstrologyReading.created_at.desc(), AstrologyReading.id.desc()).all()
    return [AstrologyReadingOut.model_validate(r) for r in readings]


def get_astrology_reading_by_id(db: Session, payload: GetReadingByIdInput) -> Optional[AstrologyReadingOut]:
    reading = db.get(AstrologyReading, payload.id)
    if not reading:
        return None
    return AstrologyReadingOut.model_validate(reading)
