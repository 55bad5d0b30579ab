#!/usr/bin/env python
"""Create the overtime schema and seed the default submission policy.

Usage:
    python scripts/migrate.py
    python scripts/migrate.py --database-url postgresql+asyncpg://...
    python scripts/migrate.py --dry-run
"""

import argparse
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from overtime_engine.config import get_settings
from overtime_engine.database import create_all, get_engine
from overtime_engine.models import Base, OTSettings


async def seed_policy(engine: AsyncEngine, cutoff_window_days: int, grace: bool) -> bool:
    """Insert the ot_settings row if none exists. Returns True if inserted."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        existing = await session.execute(select(OTSettings).limit(1))
        if existing.scalar_one_or_none() is not None:
            return False
        session.add(
            OTSettings(cutoff_window_days=cutoff_window_days, grace_period_enabled=grace)
        )
        await session.commit()
        return True


async def run(database_url: str, dry_run: bool) -> int:
    settings = get_settings()
    tables = sorted(Base.metadata.tables)

    print(f"Tables: {', '.join(tables)}")
    print()

    if dry_run:
        print(f"  [DRY RUN] Would create {len(tables)} tables (existing tables are kept)")
        print(
            f"  [DRY RUN] Would seed ot_settings: cutoff_window_days="
            f"{settings.cutoff_window_days}, grace_period_enabled={settings.grace_period_enabled}"
        )
        return 0

    engine = get_engine(database_url)
    try:
        await create_all(engine)
        print("  Schema: OK")

        inserted = await seed_policy(
            engine, settings.cutoff_window_days, settings.grace_period_enabled
        )
        print("  ot_settings: seeded" if inserted else "  ot_settings: already present")
    except Exception as e:
        print(f"  FAILED: {e}")
        return 1
    finally:
        await engine.dispose()

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create overtime engine tables")
    parser.add_argument(
        "--database-url",
        default=get_settings().database_url,
        help="Database URL (async driver)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be created without executing",
    )

    args = parser.parse_args()

    print("Overtime Schema Setup")
    print("=" * 50)
    print(f"Database: {args.database_url.split('@')[-1] if '@' in args.database_url else args.database_url}")
    print()

    return asyncio.run(run(args.database_url, args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
