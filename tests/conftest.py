import os
from decimal import Decimal

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cartshop.core import security
from cartshop.db.base import Base
from cartshop.db.session import make_engine
from cartshop.main import app
from cartshop.models.product import Product
from cartshop.models.user import User


@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session of a single test."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[security.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    """Factory: persist a user directly, bypassing password hashing."""

    def _make_user(username="alice", email=None):
        user = User(username=username, email=email or f"{username}@example.com", password_hash="not-a-hash")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_product(db):
    def _make_product(name="Wireless Mouse", price="29.99", stock=10, description=None):
        product = Product(name=name, description=description, price=Decimal(price), stock=stock)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make_product


@pytest.fixture()
def user(make_user):
    return make_user("alice")


@pytest.fixture()
def other_user(make_user):
    return make_user("bob")
