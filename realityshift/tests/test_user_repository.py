from __future__ import annotations

from datetime import UTC, datetime
from http import HTTPStatus

import pytest

from realityshift.application.services.password_hashing import BcryptPasswordHasher
from realityshift.application.services.session_tokens import JwtSessionCodec
from realityshift.application.use_cases.users.register_user import RegisterUserUseCase
from realityshift.domain.users.entities import User
from realityshift.domain.users.exceptions import UserAlreadyExistsError
from realityshift.infrastructure.db.models import UserPreferences
from realityshift.infrastructure.db.session import Database
from realityshift.infrastructure.repositories.users import SqlAlchemyUserRepository
from realityshift.shared.config import DatabaseConfig


@pytest.fixture()
def database() -> Database:
    db = Database(DatabaseConfig(url="sqlite://"))
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture()
def users(database: Database) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(database.session_factory)


def _user(email: str = "alice@example.com") -> User:
    return User(
        id="",
        email=email,
        password_hash="$2b$04$placeholder",
        display_name="Alice",
        created_at=datetime(2025, 6, 1, tzinfo=UTC),
    )


class StaleLookupRepository(SqlAlchemyUserRepository):
    """Lookup misses the row another request is inserting at the same moment."""

    def find_by_email(self, email: str) -> User | None:
        return None


def test_add_creates_user_with_default_preferences(users, database) -> None:
    stored = users.add(_user())

    assert stored.id
    assert users.find_by_email("alice@example.com") == stored
    with database.session_factory() as session:
        assert session.query(UserPreferences).filter_by(user_id=stored.id).count() == 1


def test_duplicate_email_insert_is_a_conflict(users, database) -> None:
    first = users.add(_user())

    with pytest.raises(UserAlreadyExistsError) as excinfo:
        users.add(_user())

    assert excinfo.value.status == HTTPStatus.CONFLICT
    assert users.find_by_email("alice@example.com") == first
    with database.session_factory() as session:
        assert session.query(UserPreferences).count() == 1


def test_racing_registration_reports_conflict(database) -> None:
    SqlAlchemyUserRepository(database.session_factory).add(_user())
    use_case = RegisterUserUseCase(
        users=StaleLookupRepository(database.session_factory),
        password_hasher=BcryptPasswordHasher(rounds=4),
        sessions=JwtSessionCodec("s3cret"),
    )

    with pytest.raises(UserAlreadyExistsError) as excinfo:
        use_case.execute("alice@example.com", "secret123")

    assert excinfo.value.to_dict() == {
        "success": False,
        "error": "User with this email already exists",
    }
