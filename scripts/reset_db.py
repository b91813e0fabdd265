"""Database reset script.

Run this script to drop all tables and recreate them.
This will delete every stored configuration, history and API key.

Usage:
    python -m scripts.reset_db
    or
    python scripts/reset_db.py (after pip install -e .)
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from adtax.core.config import get_settings
from adtax.db.session import close_db, create_all_tables, drop_all_tables


async def main() -> None:
    """Reset the database by dropping and recreating all tables."""
    settings = get_settings()

    try:
        print("Dropping all database tables...")
        await drop_all_tables(settings)
        print("All tables dropped successfully!")

        print("Recreating tables...")
        await create_all_tables(settings)
        print("Database reinitialized successfully!")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
