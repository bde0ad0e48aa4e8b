import time

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from app.core.errors import ConflictError, NotFoundError
from app.models import User
from app.schemas.user import CreateUserInput, UpdateUserInput
from app.services import users as user_service


def _count_users(db, email):
    return db.execute(select(func.count(User.id)).where(User.email == email)).scalar()


def test_create_user_sets_id_and_equal_timestamps(db):
    user = user_service.create_user(db, CreateUserInput(
        email="test@example.com", name="Test User", preferred_language="bengali",
    ))
    db.commit()

    assert user.id is not None
    assert user.email == "test@example.com"
    assert user.name == "Test User"
    assert user.preferred_language == "bengali"
    assert user.created_at == user.updated_at


def test_create_user_duplicate_email_fails(db, make_user):
    make_user(email="dup@example.com")

    with pytest.raises(ConflictError, match="already exists"):
        user_service.create_user(db, CreateUserInput(
            email="dup@example.com", name="Other", preferred_language="hindi",
        ))

    assert _count_users(db, "dup@example.com") == 1


@pytest.mark.parametrize("payload", [
    {"email": "not-an-email", "name": "X", "preferred_language": "english"},
    {"email": "a@example.com", "name": "", "preferred_language": "english"},
    {"email": "a@example.com", "name": "n" * 129, "preferred_language": "english"},
    {"email": "a@example.com", "name": "X", "preferred_language": "french"},
])
def test_create_user_input_validation(payload):
    with pytest.raises(ValidationError):
        CreateUserInput(**payload)


def test_update_user_name_only(db, make_user):
    created = make_user(email="keep@example.com", preferred_language="hindi")
    time.sleep(0.01)

    updated = user_service.update_user(db, UpdateUserInput(id=created.id, name="X"))
    db.commit()

    assert updated.name == "X"
    assert updated.email == "keep@example.com"
    assert updated.preferred_language == "hindi"
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


def test_update_user_multiple_fields(db, make_user):
    created = make_user()

    updated = user_service.update_user(db, UpdateUserInput(
        id=created.id, email="multi@example.com", name="Multi", preferred_language="bengali",
    ))
    db.commit()

    assert updated.email == "multi@example.com"
    assert updated.name == "Multi"
    assert updated.preferred_language == "bengali"


def test_update_user_explicit_null_is_ignored(db, make_user):
    created = make_user(email="null@example.com")

    updated = user_service.update_user(
        db, UpdateUserInput.model_validate({"id": created.id, "email": None, "name": "Y"})
    )
    db.commit()

    assert updated.email == "null@example.com"
    assert updated.name == "Y"


def test_update_user_not_found(db, make_user):
    make_user(email="only@example.com")

    with pytest.raises(NotFoundError, match=r"(?i)user with id 999 not found"):
        user_service.update_user(db, UpdateUserInput(id=999, name="Ghost"))

    assert db.execute(select(func.count(User.id))).scalar() == 1
    assert db.get(User, 999) is None


def test_update_user_to_taken_email_conflicts(db, make_user):
    make_user(email="first@example.com")
    second = make_user(email="second@example.com")

    with pytest.raises(ConflictError, match="already exists"):
        user_service.update_user(db, UpdateUserInput(id=second.id, email="first@example.com"))

    assert user_service.get_user(db, second.id).email == "second@example.com"


def test_get_user(db, make_user):
    created = make_user(name="Fetch Me")

    fetched = user_service.get_user(db, created.id)

    assert fetched is not None
    assert fetched.id == created.id
    assert fetched.name == "Fetch Me"


def test_get_user_missing_returns_none(db):
    assert user_service.get_user(db, 12345) is None
