"""Terminal rendering of catalog items."""

from cinepick.constants import MAX_EPISODES_SHOWN, MAX_SEASONS_SHOWN
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import CatalogItemData, Preferences, SeasonDetails
from cinepick.services.metadata.tmdb import poster_url
from cinepick.services.recommendations.predicate import describe

RULE = "-" * 40


def _rating(item: CatalogItemData) -> str:
    if item.vote_average is None or not item.vote_count:
        return "N/A"
    return f"{item.vote_average:.1f}/10 ({item.vote_count} votes)"


def _duration(item: CatalogItemData) -> str:
    if item.duration_minutes is None:
        return "N/A"
    label = "Runtime" if item.kind is ItemKind.MOVIE else "Episode runtime"
    return f"{label}: {item.duration_minutes} min"


def format_summary(item: CatalogItemData) -> str:
    """A few lines identifying an item."""
    lines = [
        RULE,
        f"{item.title} ({item.year or 'N/A'})",
        f"  Local ID: {item.local_id or '-'} | TMDB ID: {item.remote_id}",
        f"  Rating: {_rating(item)}",
        f"  Genres: {', '.join(item.genres) or 'N/A'}",
    ]
    if item.duration_minutes is not None:
        lines.append(f"  {_duration(item)}")
    if item.overview:
        overview = item.overview if len(item.overview) <= 120 else f"{item.overview[:120]}..."
        lines.append(f"  Overview: {overview}")
    lines.append(RULE)
    return "\n".join(lines)


def _season_lines(item: CatalogItemData) -> list[str]:
    if item.kind is not ItemKind.TV:
        return []
    lines = [f"  Seasons: {item.number_of_seasons or 'N/A'}"]
    for season in item.seasons[:MAX_SEASONS_SHOWN]:
        episodes = season.episode_count if season.episode_count is not None else "?"
        lines.append(
            f"    S{season.season_number}: {season.name or 'Season ' + str(season.season_number)}"
            f" ({episodes} episodes) - Air date: {season.air_date or 'N/A'}"
        )
    if len(item.seasons) > MAX_SEASONS_SHOWN:
        lines.append("    ...and more seasons.")
    return lines


def format_details(item: CatalogItemData, region: str) -> str:
    """Everything known about an item, including streaming availability."""
    lines = [
        RULE,
        f"{item.title} ({item.year or 'N/A'})",
        f"  Local ID: {item.local_id or '-'} | TMDB ID: {item.remote_id}",
        f"  Tagline: {item.tagline or 'N/A'}",
        f"  {_duration(item)}" if item.duration_minutes is not None else "  Runtime: N/A",
        f"  Rating: {_rating(item)}",
        f"  Genres: {', '.join(item.genres) or 'N/A'}",
        f"  Language: {item.language or 'N/A'}",
        *_season_lines(item),
        "",
        item.overview or "No overview.",
        "",
    ]
    if item.providers is None:
        lines.append(f"  Streaming ({region}): unknown")
    elif item.providers:
        lines.append(f"  Streaming ({region}): {', '.join(item.providers)}")
    else:
        lines.append(f"  Streaming ({region}): not available")
    poster = poster_url(item.poster_path)
    if poster:
        lines.append(f"  Poster: {poster}")
    lines.append(RULE)
    return "\n".join(lines)


def format_preferences(prefs: Preferences) -> str:
    return "\n".join(f"  {label}: {value}" for label, value in describe(prefs))


def format_season(season: SeasonDetails) -> str:
    """The first episodes of a season, one line each plus a short overview."""
    title = f"Season {season.season_number}" + (f": {season.name}" if season.name else "")
    lines = [f"--- {title} - Episodes (Top {MAX_EPISODES_SHOWN}) ---"]
    for episode in season.episodes[:MAX_EPISODES_SHOWN]:
        rating = f"{episode.vote_average:.1f}" if episode.vote_average is not None else "N/A"
        lines.append(
            f"  E{episode.episode_number}: {episode.name or 'TBA'}"
            f" (Air: {episode.air_date or 'TBA'}, Rating: {rating})"
        )
        if episode.overview:
            overview = episode.overview if len(episode.overview) <= 100 else f"{episode.overview[:100]}..."
            lines.append(f"    {overview}")
    if len(season.episodes) > MAX_EPISODES_SHOWN:
        lines.append("    ...and more episodes.")
    if not season.episodes:
        lines.append("  No episodes listed.")
    return "\n".join(lines)
