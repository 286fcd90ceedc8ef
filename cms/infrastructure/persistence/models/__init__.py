"""ORM models. Import here so Alembic autogenerate sees every table."""

from cms.infrastructure.persistence.models.record import Record

__all__ = ["Record"]
