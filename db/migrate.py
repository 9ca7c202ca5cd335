# db/migrate.py

import os
from pathlib import Path
from typing import Optional
from alembic import command
from alembic.config import Config
from dotenv import load_dotenv

# Load .env variables (useful in Docker or dev)
load_dotenv()

ROOT_DIR = Path(__file__).resolve().parents[1]

def run_migrations(db_url: Optional[str] = None):
    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))

    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))

    # Explicit URL wins over .env
    db_url = db_url or os.getenv("DATABASE_URL")
    if db_url:
        alembic_cfg.set_main_option("sqlalchemy.url", db_url)

    command.upgrade(alembic_cfg, "head")

if __name__ == "__main__":
    run_migrations()
