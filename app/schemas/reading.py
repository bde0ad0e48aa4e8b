# app/schemas/reading.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.astrology_reading import SIGN_MAX_LENGTH
from app.schemas.common import Language
from app.utils.numeric import to_float


# ========== 入参 ==========

class UploadImageInput(BaseModel):
    """上传手掌照片；image_data 为前端编码后的图片内容（base64），服务端不解析"""
    user_id: int
    image_data: str
    language: Language


class CreateAstrologyReadingInput(BaseModel):
    """创建星盘解读；星座与三语解读文本均由调用方提供"""
    user_id: int
    birth_date: date
    # 出生时间、出生地为自由文本，不限长度
    birth_time: str
    birth_place: str
    birth_latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    birth_longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    reading_text_bengali: str
    reading_text_hindi: str
    reading_text_english: str
    zodiac_sign: str = Field(..., max_length=SIGN_MAX_LENGTH)
    moon_sign: str = Field(..., max_length=SIGN_MAX_LENGTH)
    rising_sign: str = Field(..., max_length=SIGN_MAX_LENGTH)


class GetUserReadingsInput(BaseModel):
    # language 仅透传给前端使用，不参与过滤
    user_id: int
    language: Optional[Language] = None


class GetReadingByIdInput(BaseModel):
    id: int
    language: Optional[Language] = None


# ========== 出参 ==========

class PalmReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    image_url: str
    reading_text_bengali: str
    reading_text_hindi: str
    reading_text_english: str
    confidence_score: float = Field(..., ge=0, le=1)
    created_at: datetime

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _numeric_to_float(cls, v):
        # NUMERIC 列读出来是 Decimal
        return to_float(v)


class AstrologyReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    birth_date: date
    birth_time: str
    birth_place: str
    birth_latitude: float
    birth_longitude: float
    reading_text_bengali: str
    reading_text_hindi: str
    reading_text_english: str
    zodiac_sign: str
    moon_sign: str
    rising_sign: str
    created_at: datetime

    @field_validator("birth_latitude", "birth_longitude", mode="before")
    @classmethod
    def _numeric_to_float(cls, v):
        return to_float(v)
