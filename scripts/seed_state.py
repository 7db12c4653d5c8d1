"""
Seed script to populate the store with the default state.

Creates:
- System roles (Admin, User, Viewer)
- Sample users and groups
- The sample entity tree

Usage:
    python -m scripts.seed_state            # seed only if the store is empty
    python -m scripts.seed_state --reset    # drop everything and reseed
"""
import argparse
import asyncio

from usermgmt.core.database.engine import drop_db, get_db, init_db
from usermgmt.core.seed import build_seed_state
from usermgmt.core.store import is_empty, save_state
from usermgmt.utils import get_logger


log = get_logger(__name__)


async def main(reset: bool = False):
    """Create tables and write the seed snapshot."""
    log.info("Starting state seeding...")

    if reset:
        log.warning("Reset requested - dropping all tables")
        await drop_db()

    log.info("Initializing database tables...")
    await init_db()

    async for db in get_db():
        try:
            if not reset and not await is_empty(db):
                log.info("Store already holds data, skipping (use --reset to overwrite)")
                break

            state = build_seed_state()
            await save_state(db, state)

            log.info("State seeding completed successfully!")
            log.info("Roles created:")
            for role in state.roles:
                log.info(f"  - {role.name}: {role.description}")
        except Exception as e:
            log.error(f"Error seeding state: {e}", exc_info=True)
            raise

        break  # Only use first session


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the user management store")
    parser.add_argument("--reset", action="store_true", help="drop existing data before seeding")
    args = parser.parse_args()
    asyncio.run(main(reset=args.reset))
