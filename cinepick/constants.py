"""Application constants - centralized configuration values."""

# =============================================================================
# Ratings
# =============================================================================
RATING_MIN = 1
RATING_MAX = 5
LIKE_THRESHOLD = 4  # score >= threshold is a like
LIKE_SCORE = 5
DISLIKE_SCORE = 1

# =============================================================================
# Candidate aggregation
# =============================================================================
MAX_SEEDS = 5  # most recent liked items used as seeds
TARGET_POOL_SIZE = 20  # distinct candidates before popularity fallback stops
MAX_FALLBACK_PAGES = 5  # popularity pages fetched at most per aggregation
SIMILAR_PAGE = 1  # only the first page of similar items is requested

# =============================================================================
# Search
# =============================================================================
MAX_SEARCH_RESULTS = 10

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
HTTPX_TIMEOUT = 10.0

# =============================================================================
# Retry
# =============================================================================
RETRY_MAX_ATTEMPTS = 2
RETRY_BASE_DELAY = 0.5  # seconds

# =============================================================================
# External API URLs
# =============================================================================
TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

# =============================================================================
# TV details display
# =============================================================================
MAX_SEASONS_SHOWN = 5
MAX_EPISODES_SHOWN = 10
