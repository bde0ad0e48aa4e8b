import pytest
from sqlalchemy.dialects import mysql
from sqlalchemy.schema import CreateTable

from app.models import AstrologyReading, PalmReading, Translation, User


def _mysql_ddl(model) -> str:
    return str(CreateTable(model.__table__).compile(dialect=mysql.dialect()))


def _column_line(ddl: str, column: str) -> str:
    return next(line.strip() for line in ddl.splitlines() if line.strip().startswith(column + " "))


@pytest.mark.parametrize("model, columns", [
    (User, ["created_at", "updated_at"]),
    (Translation, ["created_at", "updated_at"]),
    (PalmReading, ["created_at"]),
    (AstrologyReading, ["created_at"]),
])
def test_mysql_timestamps_keep_microseconds(model, columns):
    ddl = _mysql_ddl(model)

    for column in columns:
        assert _column_line(ddl, column).startswith(f"{column} DATETIME(6) NOT NULL")


def test_mysql_birth_details_are_unbounded_text():
    ddl = _mysql_ddl(AstrologyReading)

    assert _column_line(ddl, "birth_time").startswith("birth_time TEXT NOT NULL")
    assert _column_line(ddl, "birth_place").startswith("birth_place TEXT NOT NULL")
