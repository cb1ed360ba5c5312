"""Preference predicate.

``matches`` is pure: it only looks at the item and the preferences. A field
the item lacks fails every active constraint on that field, since the
constraint cannot be verified. Constraints that are not set never exclude
anything.
"""

from collections.abc import Callable, Iterable

from cinepick.models.schemas import CatalogItemData, Preferences


def _folded(values: Iterable[str]) -> set[str]:
    return {v.strip().casefold() for v in values if v}


def _within(value: float | None, low: float | None, high: float | None) -> bool:
    if low is None and high is None:
        return True
    if value is None:
        return False
    if low is not None and value < low:
        return False
    return high is None or value <= high


def genres_match(item: CatalogItemData, prefs: Preferences) -> bool:
    """Any shared genre qualifies."""
    if prefs.genres is None:
        return True
    return bool(_folded(item.genres) & _folded(prefs.genres))


def language_matches(item: CatalogItemData, prefs: Preferences) -> bool:
    if prefs.languages is None:
        return True
    return item.language is not None and item.language.casefold() in _folded(prefs.languages)


def year_matches(item: CatalogItemData, prefs: Preferences) -> bool:
    return _within(item.year, prefs.year_min, prefs.year_max)


def duration_matches(item: CatalogItemData, prefs: Preferences) -> bool:
    return _within(item.duration_minutes, prefs.duration_min, prefs.duration_max)


def rating_matches(item: CatalogItemData, prefs: Preferences) -> bool:
    """An average over zero votes says nothing, so it fails an active minimum."""
    if prefs.min_rating is None:
        return True
    if not item.vote_count or item.vote_average is None:
        return False
    return item.vote_average >= prefs.min_rating


def providers_match(item: CatalogItemData, prefs: Preferences) -> bool:
    """Unknown availability (never fetched) is not a match."""
    if prefs.providers is None:
        return True
    if item.providers is None:
        return False
    return bool(_folded(item.providers) & _folded(prefs.providers))


RULES: tuple[Callable[[CatalogItemData, Preferences], bool], ...] = (
    genres_match,
    language_matches,
    year_matches,
    duration_matches,
    rating_matches,
    providers_match,
)


def matches(item: CatalogItemData, prefs: Preferences) -> bool:
    """True when the item satisfies every constraint set in ``prefs``."""
    return all(rule(item, prefs) for rule in RULES)


def failed_rules(item: CatalogItemData, prefs: Preferences) -> list[str]:
    """Names of the rules the item fails, for debug logging."""
    return [rule.__name__ for rule in RULES if not rule(item, prefs)]


def _range(low: float | None, high: float | None, unit: str = "") -> str:
    if low is None and high is None:
        return "Any"
    if low is None:
        return f"up to {high:g}{unit}"
    if high is None:
        return f"{low:g}{unit} or more"
    return f"{low:g}-{high:g}{unit}"


def describe(prefs: Preferences) -> list[tuple[str, str]]:
    """Label/value pairs for display, with "Any" for unset fields."""
    return [
        ("Genres", ", ".join(prefs.genres) if prefs.genres else "Any"),
        ("Languages", ", ".join(prefs.languages) if prefs.languages else "Any"),
        ("Years", _range(prefs.year_min, prefs.year_max)),
        ("Duration", _range(prefs.duration_min, prefs.duration_max, " min")),
        ("Minimum rating", f"{prefs.min_rating:g}/10" if prefs.min_rating is not None else "Any"),
        ("Streaming on", ", ".join(prefs.providers) if prefs.providers else "Any"),
    ]
