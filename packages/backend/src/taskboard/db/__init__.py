"""SQL persistence: ORM models, engine factory, Alembic migrations."""
