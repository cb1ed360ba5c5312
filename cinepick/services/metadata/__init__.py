"""Remote catalog metadata."""

from cinepick.services.metadata.tmdb import TMDBService, clear_genre_cache, poster_url

__all__ = ["TMDBService", "clear_genre_cache", "poster_url"]
