"""Replace the work program catalog with the standard programs."""

import argparse
import asyncio
import os
import sys

local_dir = os.path.dirname(os.path.realpath(__file__))  # noqa
sys.path.append(os.path.join(local_dir, os.path.pardir))  # noqa

# pylint: disable=import-error, wrong-import-position
from prisonsphere import db, enrollment


async def main():
    """Seed the work program catalog"""

    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="only add missing programs instead of replacing the catalog",
    )
    args = parser.parse_args()

    async with db.async_session() as session:
        added = await enrollment.seed_programs(
            session, replace=not args.keep_existing
        )

    print(f"Added {added} work programs")


if __name__ == "__main__":
    asyncio.run(main())
