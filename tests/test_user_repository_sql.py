import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.db.models import User
from app.exceptions import ConflictError, ServiceUnavailableError
from app.infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository


@pytest.fixture
def session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


def test_create_and_lookup(session):
    repo = SqlUserRepository(session)
    created = repo.create("alice@example.com", "alice", "010-1234-5678", "hash")
    assert created.id is not None
    assert created.deleted_at is None

    assert repo.get_by_email("alice@example.com").id == created.id
    assert repo.get_by_id(created.id).nickname == "alice"
    assert repo.get_by_nickname("alice").email == "alice@example.com"
    assert repo.get_by_phone("010-1234-5678").password == "hash"
    assert repo.get_by_email("nobody@example.com") is None
    assert repo.get_by_id(999) is None


def test_duplicate_insert_is_conflict(session):
    repo = SqlUserRepository(session)
    repo.create("alice@example.com", "alice", "010-1234-5678", "hash")
    with pytest.raises(ConflictError):
        repo.create("alice@example.com", "alice2", "010-1111-2222", "hash")
    # session is usable again after the rollback
    assert repo.get_by_nickname("alice2") is None


def test_update_password_and_soft_delete(session):
    repo = SqlUserRepository(session)
    user = repo.create("alice@example.com", "alice", "010-1234-5678", "hash")

    repo.update_password(user.id, "new-hash")
    assert repo.get_by_id(user.id).password == "new-hash"

    repo.soft_delete(user.id)
    deleted = repo.get_by_id(user.id)
    assert deleted.is_deleted
    assert repo.get_by_email("alice@example.com").is_deleted


def test_database_errors_are_unavailable(session, monkeypatch):
    repo = SqlUserRepository(session)

    def broken_exec(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "exec", broken_exec)
    with pytest.raises(ServiceUnavailableError):
        repo.get_by_email("alice@example.com")
