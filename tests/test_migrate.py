from sqlalchemy import create_engine, inspect

from db.migrate import run_migrations


def test_migrations_create_all_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"

    run_migrations(url)

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {"disease_data", "user_roles", "auth_sessions", "alembic_version"} <= tables
