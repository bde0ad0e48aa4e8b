# app/services/palm_readings.py
import time
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.models.palm_reading import CONFIDENCE_SCALE, PalmReading
from app.schemas.reading import (
    GetReadingByIdInput,
    GetUserReadingsInput,
    PalmReadingOut,
    UploadImageInput,
)
from app.services import users as user_service
from app.services.ai import ReadingGenerator, get_reading_generator
from app.utils.numeric import to_decimal

logger = get_logger("services.palm_readings")


def build_image_url(user_id: int) -> str:
    """模拟云存储地址（图片本身不落盘）"""
    base = settings.palm_image_base_url.rstrip("/")
    return f"{base}/user-{user_id}-{int(time.time() * 1000)}.jpg"


def upload_palm_image(
    db: Session,
    payload: UploadImageInput,
    generator: Optional[ReadingGenerator] = None,
) -> PalmReadingOut:
    """
    上传手掌照片并生成解读
    - 用户必须存在，否则 NotFoundError
    - 三种语言的解读文本都会生成并保存，与 payload.language 无关
    """
    if not user_service.exists(db, payload.user_id):
        raise NotFoundError("User not found")

    generator = generator or get_reading_generator()
    try:
        analysis = generator.analyze_palm(payload.image_data, payload.language)

        reading = PalmReading(
            user_id=payload.user_id,
            image_url=build_image_url(payload.user_id),
            reading_text_bengali=analysis.text_bengali,
            reading_text_hindi=analysis.text_hindi,
            reading_text_english=analysis.text_english,
            confidence_score=to_decimal(analysis.confidence_score, CONFIDENCE_SCALE),
        )
        db.add(reading)
        db.flush()
    except Exception:
        logger.exception("palm_upload_failed", user_id=payload.user_id)
        raise

    logger.info(
        "palm_reading_created",
        reading_id=reading.id,
        user_id=reading.user_id,
        confidence=float(reading.confidence_score),
    )
    return PalmReadingOut.model_validate(reading)


def get_user_palm_readings(db: Session, payload: GetUserReadingsInput) -> List[PalmReadingOut]:
    """用户的全部手相解读，最新的在前"""
    readings = db.query(PalmReading).filter(
        PalmReading.user_id == payload.user_id
    ).order_by(PalmReading.created_at.desc(), PalmReading.id.desc()).all()
    return [PalmReadingOut.model_validate(r) for r in readings]


def get_palm_reading_by_id(db: Session, payload: GetReadingByIdInput) -> Optional[PalmReadingOut]:
    reading = db.get(PalmReading, payload.id)
    if not reading:
        return None
    return PalmReadingOut.model_validate(reading)
