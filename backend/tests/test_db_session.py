"""Tests for session helpers."""

import pytest
from sqlalchemy.orm import sessionmaker

from testhub.db.base import Base
from testhub.db.engine import create_db_engine
from testhub.db.session import session_scope
from testhub.models.user import User


@pytest.fixture
def factory():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


def test_session_scope_commits(factory):
    with session_scope(factory) as db:
        db.add(User(email="scope@example.com"))

    with session_scope(factory) as db:
        assert db.query(User).filter_by(email="scope@example.com").count() == 1


def test_session_scope_rolls_back_on_error(factory):
    with pytest.raises(RuntimeError):
        with session_scope(factory) as db:
            db.add(User(email="scope@example.com"))
            db.flush()
            raise RuntimeError("boom")

    with session_scope(factory) as db:
        assert db.query(User).count() == 0
