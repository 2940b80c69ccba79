"""
CLI entrypoint for the token retention job. Run from cron, e.g.:

  python -m app.retention

Or hourly: 0 * * * * cd /path/to/ngo-frf && .venv/bin/python -m app.retention
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.services.retention import run_retention

logger = logging.getLogger(__name__)


def main() -> int:
    """Run retention: prune expired revocation rows and refresh sessions."""
    configure_logging()
    settings = get_settings()
    db = SessionLocal()
    try:
        revoked_deleted, sessions_deleted = run_retention(db, settings)
        logger.info(
            "Retention completed: revoked_tokens_deleted=%s, refresh_sessions_deleted=%s",
            revoked_deleted,
            sessions_deleted,
        )
        return 0
    except Exception as e:
        logger.exception("Retention job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
