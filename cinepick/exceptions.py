"""Exceptions raised by Cinepick."""

from cinepick.constants import RATING_MAX, RATING_MIN


class CinepickError(Exception):
    """Base class for all Cinepick errors."""


class MissingCredentialsError(CinepickError):
    """No TMDB credential is configured. Fatal at startup."""

    def __init__(self) -> None:
        super().__init__(
            "Neither TMDB_API_READ_ACCESS_TOKEN nor TMDB_API_KEY is set. "
            "Add at least one to your environment or .env file."
        )


class UserNotFoundError(CinepickError):
    """Operation was requested for a user that does not exist."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} does not exist")


class InvalidRatingError(CinepickError):
    """Rating score outside the accepted range."""

    def __init__(self, score: int) -> None:
        self.score = score
        super().__init__(f"Rating must be between {RATING_MIN} and {RATING_MAX}, got {score}")
