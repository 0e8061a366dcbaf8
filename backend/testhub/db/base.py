"""Declarative base shared by all models.

Model modules are registered on ``Base.metadata`` by importing
``testhub.models``; do that before ``create_all`` or autogenerate.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass
