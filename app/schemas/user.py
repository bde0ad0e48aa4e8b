# app/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.user import NAME_MAX_LENGTH
from app.schemas.common import Language


class CreateUserInput(BaseModel):
    """注册用户"""
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="姓名")
    preferred_language: Language


class UpdateUserInput(BaseModel):
    """
    更新用户资料
    - 除 id 外全部可选；未传（或传 null）表示不修改
    - 不支持把字段清空
    """
    id: int
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    preferred_language: Optional[Language] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    preferred_language: Language
    created_at: datetime
    updated_at: datetime
