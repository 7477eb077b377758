#!/usr/bin/env python
"""Script to rebuild the public user table from the private user table.

This script:
1. Reads every row of the private user table
2. Merges the public fields of each row into the public user table
3. Deletes public rows whose private row no longer exists

Use it after a failed sync left public records stale. Running it twice in
a row is harmless; the second pass only refreshes updatedAt.

Usage:
    python scripts/reconcile_public_users.py

Requirements:
    - SUPABASE_URL and SUPABASE_SECRET_KEY environment variables must be set
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import get_settings
from src.services.user_sync_service import UserSyncService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def main() -> int:
    settings = get_settings()
    logger.info(
        "Reconciling %s from %s",
        settings.public_users_table,
        settings.private_users_table,
    )

    try:
        result = await UserSyncService().reconcile()
    except Exception:
        logger.exception("Reconciliation failed")
        return 1

    logger.info("Done: %d merged, %d deleted", result.merged, result.deleted)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
