"""Per-kind menu: recommendations, rating, details and preferences."""

from collections.abc import Awaitable, Callable
from typing import Literal

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.cli.display import format_details, format_preferences, format_season, format_summary
from cinepick.cli.prompts import ask, parse_choice, parse_float, parse_int, parse_list
from cinepick.constants import MAX_SEARCH_RESULTS, RATING_MAX, RATING_MIN
from cinepick.db.crud.items import upsert_cached_item
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import CatalogItemData, Preferences
from cinepick.models.user import User
from cinepick.services.metadata.tmdb import TMDBService
from cinepick.services.recommendations.session import RecommendationSession
from cinepick.utils.logging import get_logger

logger = get_logger(__name__)

Reaction = Literal["liked", "disliked", "skipped", "quit"]


async def _react(
    session: RecommendationSession,
    item: CatalogItemData,
    prompt: str,
    on_details: Callable[[], Awaitable[Reaction]] | None = None,
) -> Reaction:
    """Ask until the user reacts. "v" hands over to ``on_details`` when given."""
    while True:
        action = (await ask(prompt)).lower()
        if action == "l":
            await session.like(item)
            print(f'You liked "{item.title}"!')
            return "liked"
        if action == "d":
            await session.dislike(item)
            print(f'You disliked "{item.title}".')
            return "disliked"
        if action == "n":
            session.skip(item)
            return "skipped"
        if action == "q":
            return "quit"
        if action == "v" and on_details is not None:
            return await on_details()
        print("Invalid action.")


async def _load_details(
    db: AsyncSession,
    client: TMDBService,
    item: CatalogItemData,
) -> CatalogItemData:
    """Fresh details written through to the cache; the given item if TMDB fails."""
    details = await client.fetch_item_details(item.remote_id, item.kind)
    if details is None:
        print("Could not fetch full details from TMDB. Showing cached info.")
        return item
    details.local_id = (await upsert_cached_item(db, details)).id
    return details


async def browse_seasons(client: TMDBService, item: CatalogItemData) -> None:
    """Offer the episode list of one of the show's regular seasons."""
    numbers = {season.season_number for season in item.seasons}
    if not numbers:
        return

    number = parse_int(await ask("View episodes for season number (or 0 to skip): "), None)
    if number is None or number not in numbers:
        return

    print(f"Fetching S{number} details...")
    season = await client.fetch_season_details(item.remote_id, number)
    if season is None:
        print(f"Could not fetch episodes for S{number}.")
        return
    print(format_season(season))


async def view_details(
    session: RecommendationSession,
    client: TMDBService,
    item: CatalogItemData,
) -> Reaction:
    """Show full details, then ask for a reaction."""
    print(f'\nFetching latest details for "{item.title}" (TMDB ID: {item.remote_id})...')
    detailed = await _load_details(session.db, client, item)
    print(format_details(detailed, client.region))
    if detailed.kind is ItemKind.TV:
        await browse_seasons(client, detailed)
    return await _react(
        session,
        detailed,
        f"Action: [L]ike ({RATING_MAX}), [D]islike ({RATING_MIN}), [N]ext, [Q]uit to menu: ",
    )


async def present_recommendations(session: RecommendationSession, client: TMDBService) -> None:
    """Walk through one batch of recommendations, one item at a time."""
    print(f"\nFetching {session.kind.label} recommendations...")
    if session.preferences.is_empty:
        print("Your preferences are not set, so results may be very general (option 4).")

    items = await session.next_batch()
    if not items:
        print("No recommendations available based on current criteria.")
        print("Try rating more titles (option 2) or adjusting your preferences (option 4).")
        return

    print(f"\nHere are {len(items)} recommendations, one by one:")
    for item in items:
        if session.is_hidden(item):
            continue
        print(format_summary(item))
        reaction = await _react(
            session,
            item,
            f"Choose: [L]ike ({RATING_MAX}), [D]islike ({RATING_MIN}), [V]iew details, [N]ext, [Q]uit to menu: ",
            on_details=lambda: view_details(session, client, item),
        )
        if reaction == "quit":
            print("Returning to menu...")
            return

    print("\nFinished this batch of recommendations.")


async def search_and_select(client: TMDBService, kind: ItemKind) -> CatalogItemData | None:
    """Search TMDB by title and let the user pick a result."""
    query = await ask(f"Search for a {kind.label} title: ")
    if not query:
        return None

    page = await client.search(query, kind)
    if page is None:
        print("Search failed; TMDB may be unreachable.")
        return None
    results = page.items[:MAX_SEARCH_RESULTS]
    if not results:
        print("Nothing found for your search.")
        return None

    print(f"\nSearch results (top {len(results)}):")
    for index, item in enumerate(results, 1):
        print(f"  {index}. {item.title} ({item.year or 'N/A'}) [TMDB ID: {item.remote_id}]")

    while True:
        choice = await ask("Select by number (or 0 to cancel): ")
        if choice in ("0", "q"):
            return None
        index = parse_choice(choice, len(results))
        if index is not None:
            return results[index]
        print("Invalid selection. Enter a number from the list or 0.")


async def rate_title(session: RecommendationSession, client: TMDBService) -> None:
    """Search for a title and record a 1-5 rating for it."""
    selected = await search_and_select(client, session.kind)
    if selected is None:
        return

    details = await client.fetch_item_details(selected.remote_id, session.kind)
    if details is None:
        print("Could not fetch details for the selected title. Cannot rate.")
        return
    details.local_id = (await upsert_cached_item(session.db, details)).id
    print(format_summary(details))

    answer = await ask(f'Rate "{details.title}" ({RATING_MIN}-{RATING_MAX}, or 0 to skip): ')
    score = parse_int(answer, None)
    if score == 0:
        return
    if score is None or not RATING_MIN <= score <= RATING_MAX:
        print(f"Invalid rating. Enter a number between {RATING_MIN} and {RATING_MAX}, or 0.")
        return

    await session.rate(details, score)
    print(f'Rated "{details.title}" {score}/{RATING_MAX}. Thank you!')


async def search_and_view(session: RecommendationSession, client: TMDBService) -> None:
    selected = await search_and_select(client, session.kind)
    if selected is not None:
        await view_details(session, client, selected)


async def edit_preferences(current: Preferences, genre_names: list[str]) -> Preferences:
    """Prompt for each preference field.

    Blank input keeps the current value, "any" resets it.
    """
    print("\nBlank keeps the current value, 'any' removes the constraint.")
    if genre_names:
        print(f"Available genres: {', '.join(genre_names)}")

    fields = {
        "genres": parse_list(
            await ask(f"Preferred genres (comma-separated) [{', '.join(current.genres or []) or 'Any'}]: "),
            current.genres,
        ),
        "languages": parse_list(
            await ask(f"Languages, e.g. en,fr,ko [{', '.join(current.languages or []) or 'Any'}]: "),
            current.languages,
            lower=True,
        ),
        "year_min": parse_int(await ask(f"Earliest year [{current.year_min or 'Any'}]: "), current.year_min),
        "year_max": parse_int(await ask(f"Latest year [{current.year_max or 'Any'}]: "), current.year_max),
        "duration_min": parse_int(
            await ask(f"Minimum duration in minutes [{current.duration_min or 'Any'}]: "),
            current.duration_min,
        ),
        "duration_max": parse_int(
            await ask(f"Maximum duration in minutes [{current.duration_max or 'Any'}]: "),
            current.duration_max,
        ),
        "min_rating": parse_float(
            await ask(f"Minimum TMDB rating 0-10 [{current.min_rating if current.min_rating is not None else 'Any'}]: "),
            current.min_rating,
        ),
        "providers": parse_list(
            await ask(f"Streaming providers, e.g. Netflix,Hulu [{', '.join(current.providers or []) or 'Any'}]: "),
            current.providers,
        ),
    }
    return Preferences(**fields)


async def manage_preferences(session: RecommendationSession, client: TMDBService) -> None:
    print(f"\n--- {session.kind.label.capitalize()} preferences ---")
    print(format_preferences(session.preferences))

    genres = [g.name for g in await client.get_genre_list(session.kind)]
    try:
        updated = await edit_preferences(session.preferences, genres)
    except ValidationError as e:
        print(f"Preferences not saved: {e.errors()[0]['msg']}")
        return

    await session.update_preferences(updated)
    print("Preferences updated:")
    print(format_preferences(updated))


async def run_catalog_menu(
    db: AsyncSession,
    client: TMDBService,
    user: User,
    kind: ItemKind,
) -> None:
    """Menu loop for one kind; exclusions live as long as this loop."""
    session = await RecommendationSession.start(db, client, user.id, kind)
    logger.debug(f"Session for user {user.id} ({kind.value}) starts with {len(session.exclusions)} exclusions")

    actions = {
        "1": present_recommendations,
        "2": rate_title,
        "3": search_and_view,
        "4": manage_preferences,
    }

    while True:
        print(f"\n--- {kind.label.capitalize()} recommender ({user.name}) ---")
        print("1. Get recommendations (one by one)")
        print(f"2. Rate a {kind.label} (search & rate)")
        print(f"3. Search and view {kind.label} details")
        print("4. Manage my preferences")
        print("0. Back to main menu")

        choice = await ask("Choose an option: ")
        if choice in ("0", "q"):
            return
        action = actions.get(choice)
        if action is None:
            print("Invalid option. Please try again.")
            continue
        await action(session, client)
