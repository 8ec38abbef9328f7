"""Shared fixtures: an in-memory database per test and API clients."""

import os

# Keep the module-level engine off the developer's real database file.
os.environ.setdefault("TJ_DATABASE_URL", "sqlite://")
os.environ.setdefault("TJ_JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

import journal.models  # noqa: F401
from journal.database import build_engine, get_session
from journal.models.account import Account
from journal.models.user import User
from journal.repositories.accounts import AccountRepository
from journal.services.auth import create_access_token


@pytest.fixture
def engine():
    eng = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    # Objects stay readable after commit so fixtures can end their transaction;
    # an open read transaction would block the API client's writes.
    with Session(engine, expire_on_commit=False) as s:
        yield s


def _make_user(session: Session, email: str) -> User:
    user = User(email=email, hashed_password="not-a-real-hash")
    session.add(user)
    session.commit()
    session.refresh(user)
    session.commit()
    return user


@pytest.fixture
def user(session):
    return _make_user(session, "trader@example.com")


@pytest.fixture
def other_user(session):
    return _make_user(session, "someone-else@example.com")


@pytest.fixture
def make_account(session):
    """Factory: create an account, optionally seeded with a starting balance."""

    def _make(owner: User, name: str = "Main", balance: float = 0.0) -> Account:
        account = Account(
            user_id=owner.id,
            name=name,
            broker="IC Markets",
            account_number="12345678",
        )
        session.add(account)
        session.commit()
        session.refresh(account)
        if balance:
            account = AccountRepository(session).apply_balance_delta(account.id, owner.id, balance)
        session.commit()
        return account

    return _make


@pytest.fixture
def balance_of(session):
    def _balance(account_id: int) -> float:
        return session.get(Account, account_id, populate_existing=True).current_balance

    return _balance


@pytest.fixture
def client(engine):
    """API client bound to the test database; lifespan (scheduler, DDL) is not run."""
    from journal.main import app

    def _override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(owner: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(owner.id)}"}

    return _headers
