"""Application constants - centralized configuration values."""

# =============================================================================
# Shelves
# =============================================================================
DEFAULT_REVIEW_SHELF = "read"  # Shelf used when a review lazily shelves a book
ANONYMOUS_REVIEWER_NAME = "Anonymous"

# =============================================================================
# Rating
# =============================================================================
RATING_MIN = 1
RATING_MAX = 5

# =============================================================================
# Catalog
# =============================================================================
CATALOG_PAGE_SIZE = 10
CATALOG_MAX_PAGE = 100
SEARCH_MIN_LENGTH = 1

# =============================================================================
# Cache TTLs (in seconds)
# =============================================================================
CACHE_TTL_CATALOG_SEARCH = 15 * 60  # 15 minutes
CACHE_TTL_CATALOG_ITEM = 6 * 60 * 60  # 6 hours

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
API_TIMEOUT_EXTERNAL = 15.0

# =============================================================================
# Catalog retries
# =============================================================================
CATALOG_MAX_RETRIES = 2
CATALOG_RETRY_BASE_DELAY = 0.5  # seconds, doubled per attempt
CATALOG_RETRY_MAX_DELAY = 8.0  # also caps a 429's Retry-After

# =============================================================================
# Database pool (one session per request, no background workers)
# =============================================================================
DB_POOL_SIZE = 5
DB_MAX_OVERFLOW = 10
DB_POOL_TIMEOUT = 10  # seconds
DB_POOL_RECYCLE = 1800  # seconds
DB_COMMAND_TIMEOUT = 30.0  # seconds

# =============================================================================
# Session & Security
# =============================================================================
SESSION_TIMEOUT_DAYS = 7
SESSION_COOKIE_NAME = "shelfwise_session"

