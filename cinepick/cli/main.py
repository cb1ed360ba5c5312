"""Interactive movie and TV show recommender.

Usage:
    cinepick [--user=NAME_OR_ID] [--kind=movie|tv] [--log-level=LEVEL]

Options:
    --user       Skip the user picker (name or numeric id)
    --kind       Go straight to the movie or TV menu
    --log-level  Override LOG_LEVEL for this run
"""

import argparse
import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.cli.catalog import run_catalog_menu
from cinepick.cli.prompts import ask, parse_choice
from cinepick.config import get_settings
from cinepick.db.crud.users import create_user, get_user, get_user_by_name, list_users, seed_demo_users
from cinepick.db.database import get_session, init_db
from cinepick.exceptions import MissingCredentialsError
from cinepick.models.catalog import ItemKind
from cinepick.models.user import User
from cinepick.services.metadata.tmdb import TMDBService
from cinepick.utils.cache import cache
from cinepick.utils.http_client import close_all_clients
from cinepick.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def find_user(db: AsyncSession, ref: str) -> User | None:
    """Look a user up by numeric id or by name."""
    if ref.isdigit():
        return await get_user(db, int(ref))
    return await get_user_by_name(db, ref)


async def choose_user(db: AsyncSession) -> User | None:
    """Pick an existing user, or create one by typing a new name."""
    users = list(await list_users(db))
    print("\n--- Select user ---")
    for index, user in enumerate(users, 1):
        print(f"  {index}. {user.name}")
    print("Type a number, an existing name or a new name (blank to quit).")

    while True:
        answer = await ask("User: ")
        if not answer or answer.lower() == "q":
            return None
        index = parse_choice(answer, len(users))
        if index is not None:
            return users[index]
        user = await get_user_by_name(db, answer)
        if user is not None:
            return user
        if answer.isdigit():
            print("No user with that number.")
            continue
        user = await create_user(db, answer)
        print(f"Created user {user.name}.")
        return user


async def main_menu(db: AsyncSession, client: TMDBService, user: User) -> None:
    kinds = {"1": ItemKind.MOVIE, "2": ItemKind.TV}
    while True:
        print(f"\n=== {get_settings().app_name} ({user.name}) ===")
        print("1. Movies")
        print("2. TV shows")
        print("0. Quit")

        choice = await ask("Choose an option: ")
        if choice in ("0", "q"):
            return
        kind = kinds.get(choice)
        if kind is None:
            print("Invalid option. Please try again.")
            continue
        await run_catalog_menu(db, client, user, kind)


async def run(user_ref: str | None = None, kind: ItemKind | None = None) -> int:
    """Start the recommender. Returns the process exit code."""
    try:
        client = TMDBService.from_settings()
    except MissingCredentialsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    await init_db()
    await cache.connect()

    try:
        async with get_session() as db:
            await seed_demo_users(db)

            if user_ref:
                user = await find_user(db, user_ref)
                if user is None:
                    print(f"Error: unknown user {user_ref!r}", file=sys.stderr)
                    return 1
            else:
                user = await choose_user(db)
                if user is None:
                    return 0

            logger.info(f"Session started for user {user.id} ({user.name})")
            print(f"\nWelcome, {user.name}!")
            if kind is not None:
                await run_catalog_menu(db, client, user, kind)
            else:
                await main_menu(db, client, user)
    finally:
        await close_all_clients()
        await cache.close()

    print("Goodbye!")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Movie and TV show recommendations from TMDB")
    parser.add_argument("--user", help="User name or id (skips the user picker)")
    parser.add_argument(
        "--kind",
        choices=[k.value for k in ItemKind],
        help="Open the movie or TV menu directly",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the LOG_LEVEL setting",
    )
    args = parser.parse_args()

    setup_logging(args.log_level)
    kind = ItemKind(args.kind) if args.kind else None
    try:
        sys.exit(asyncio.run(run(args.user, kind)))
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(130)


if __name__ == "__main__":
    main()
