import time

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from app.models import Translation
from app.schemas.translation import CreateTranslationInput, GetTranslationsInput
from app.services import translations as translation_service


WELCOME = CreateTranslationInput(
    key="welcome_message",
    text_bengali="স্বাগতম",
    text_hindi="स्वागत है",
    text_english="Welcome",
)


def _seed(db, key, english):
    translation_service.create_translation(db, CreateTranslationInput(
        key=key, text_bengali=f"{english}-bn", text_hindi=f"{english}-hi", text_english=english,
    ))
    db.commit()


def test_create_translation(db):
    result = translation_service.create_translation(db, WELCOME)
    db.commit()

    assert result.id is not None
    assert result.key == "welcome_message"
    assert result.text_bengali == "স্বাগতম"
    assert result.text_hindi == "स्वागत है"
    assert result.text_english == "Welcome"
    assert result.created_at == result.updated_at


def test_create_translation_same_key_updates_in_place(db):
    first = translation_service.create_translation(db, WELCOME)
    db.commit()
    time.sleep(0.01)

    second = translation_service.create_translation(db, CreateTranslationInput(
        key="welcome_message", text_bengali="নমস্কার", text_hindi="नमस्ते", text_english="Hello",
    ))
    db.commit()

    count = db.execute(
        select(func.count(Translation.id)).where(Translation.key == "welcome_message")
    ).scalar()
    assert count == 1
    assert second.id == first.id
    assert second.text_bengali == "নমস্কার"
    assert second.text_hindi == "नमस्ते"
    assert second.text_english == "Hello"
    assert second.created_at == first.created_at
    assert second.updated_at > first.updated_at


def test_create_translation_distinct_keys(db):
    _seed(db, "hello", "Hello")
    _seed(db, "bye", "Goodbye")

    assert db.execute(select(func.count(Translation.id))).scalar() == 2


def test_get_translations_filters_by_keys(db):
    _seed(db, "a", "Alpha")
    _seed(db, "b", "Beta")

    result = translation_service.get_translations(
        db, GetTranslationsInput(language="english", keys=["a", "missing"])
    )

    assert result == {"a": "Alpha"}


def test_get_translations_all_when_keys_empty(db):
    _seed(db, "a", "Alpha")
    _seed(db, "b", "Beta")

    assert translation_service.get_translations(db, GetTranslationsInput(language="english")) == {
        "a": "Alpha", "b": "Beta",
    }
    assert translation_service.get_translations(db, GetTranslationsInput(language="english", keys=[])) == {
        "a": "Alpha", "b": "Beta",
    }


def test_get_translations_picks_requested_language(db):
    _seed(db, "a", "Alpha")

    assert translation_service.get_translations(db, GetTranslationsInput(language="hindi")) == {"a": "Alpha-hi"}
    assert translation_service.get_translations(db, GetTranslationsInput(language="bengali")) == {"a": "Alpha-bn"}


def test_get_translations_unrecognized_language_falls_back_to_english(db):
    _seed(db, "a", "Alpha")

    payload = GetTranslationsInput.model_construct(language="tamil", keys=None)

    assert translation_service.get_translations(db, payload) == {"a": "Alpha"}


def test_get_translations_empty_table(db):
    assert translation_service.get_translations(db, GetTranslationsInput(language="english", keys=["x"])) == {}


def test_create_translation_generic_path(db, monkeypatch):
    # 不支持原生 upsert 的方言走先查再写
    monkeypatch.setattr(translation_service, "_native_upsert_stmt", lambda dialect, values: None)

    first = translation_service.create_translation(db, WELCOME)
    db.commit()
    second = translation_service.create_translation(db, CreateTranslationInput(
        key="welcome_message", text_bengali="নমস্কার", text_hindi="नमस्ते", text_english="Hello",
    ))
    db.commit()

    assert second.id == first.id
    assert second.text_english == "Hello"
    assert db.execute(select(func.count(Translation.id))).scalar() == 1


def test_create_translation_key_too_long_rejected():
    with pytest.raises(ValidationError):
        CreateTranslationInput(key="k" * 192, text_bengali="b", text_hindi="h", text_english="e")
