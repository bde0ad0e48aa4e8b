# app/schemas/translation.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.translation import KEY_MAX_LENGTH
from app.schemas.common import Language


class GetTranslationsInput(BaseModel):
    """keys 为空或不传时返回全部文案"""
    language: Language
    keys: Optional[List[str]] = None


class CreateTranslationInput(BaseModel):
    key: str = Field(..., max_length=KEY_MAX_LENGTH)
    text_bengali: str
    text_hindi: str
    text_english: str


class TranslationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    text_bengali: str
    text_hindi: str
    text_english: str
    created_at: datetime
    updated_at: datetime
