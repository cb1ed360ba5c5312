"""Cinepick: movie and TV show recommendations from TMDB."""

__version__ = "0.1.0"
