import os

import uvicorn

from leadcrm.core.config import settings


def run_migrations():
    """Run Alembic migrations."""
    try:
        from alembic.config import Config
        from alembic import command

        alembic_cfg = Config("alembic.ini")
        print("[STARTUP] Running database migrations...")
        command.upgrade(alembic_cfg, "head")
        print("[STARTUP] Migrations complete!")
        return True
    except Exception as e:
        print(f"[WARN] Migration failed: {e}")
        return False


if __name__ == "__main__":
    host = settings.HOST
    port = settings.PORT

    # Tables are otherwise created by init_db() at application startup
    if os.getenv("RUN_MIGRATIONS") == "true":
        run_migrations()

    # Disable reload in production
    reload = os.getenv("ENV") == "development"

    uvicorn.run(
        "leadcrm.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
        workers=1,
    )
