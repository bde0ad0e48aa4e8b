import os

# 必须在导入 app.* 之前设置：测试使用内存 SQLite，不写日志文件
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("READING_GENERATOR", "stub")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import app.models  # noqa: F401
from app.db import Base, build_engine, get_db
from app.schemas.user import CreateUserInput
from app.services import users as user_service


@pytest.fixture()
def engine():
    eng = build_engine("sqlite://")
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    from main import create_app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application = create_app()
    application.dependency_overrides[get_db] = override_get_db
    with TestClient(application) as c:
        yield c


@pytest.fixture()
def make_user(db):
    """创建并提交一个用户，返回 UserOut"""
    counter = {"n": 0}

    def _make(email=None, name="Test User", preferred_language="english"):
        counter["n"] += 1
        user = user_service.create_user(db, CreateUserInput(
            email=email or f"user{counter['n']}@example.com",
            name=name,
            preferred_language=preferred_language,
        ))
        db.commit()
        return user

    return _make
