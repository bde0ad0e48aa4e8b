# init_db.py
from __future__ import annotations

import logging
from typing import Iterable

from app.db import Base, engine, session_scope
# 一定要导入 models 才能把所有 Table 注册到 Base.metadata
import app.models as models  # noqa: F401
from app.schemas.translation import CreateTranslationInput
from app.services import translations as translation_service

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(message)s",
)

# ---- 最小化默认文案（仅在 key 不存在时写入，不覆盖已有文案） ----
SEED_TRANSLATIONS: Iterable[dict] = [
    {
        "key": "app_title",
        "text_bengali": "হস্তরেখা ও জ্যোতিষ",
        "text_hindi": "हस्तरेखा और ज्योतिष",
        "text_english": "Palmistry & Astrology",
    },
    {
        "key": "upload_palm",
        "text_bengali": "হাতের ছবি আপলোড করুন",
        "text_hindi": "हथेली की फोटो अपलोड करें",
        "text_english": "Upload palm photo",
    },
    {
        "key": "birth_details",
        "text_bengali": "জন্মের বিবরণ",
        "text_hindi": "जन्म विवरण",
        "text_english": "Birth details",
    },
]


def create_tables() -> None:
    """
    创建所有表（幂等）。
    """
    logger.info("Creating database tables (if not exist)...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("All tables are up to date.")


def seed_translations() -> None:
    inserted = 0
    with session_scope() as db:
        for item in SEED_TRANSLATIONS:
            if translation_service.get_by_key(db, item["key"]):
                continue
            translation_service.create_translation(db, CreateTranslationInput(**item))
            inserted += 1

    if inserted:
        logger.info("Seeded %d translation(s).", inserted)
    else:
        logger.info("No translations seeded (all present).")


def main() -> None:
    create_tables()
    # 如不想自动灌入数据，注释掉下一行即可
    seed_translations()


if __name__ == "__main__":
    main()
