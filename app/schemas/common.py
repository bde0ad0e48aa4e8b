# app/schemas/common.py
from typing import Literal

# 支持的语言；与 models.user.LANGUAGES 保持一致
Language = Literal["bengali", "hindi", "english"]

DEFAULT_LANGUAGE: Language = "english"
