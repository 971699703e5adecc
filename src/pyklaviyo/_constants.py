"""Internal constants shared across the library."""

BASE_URL = "https://a.klaviyo.com"
API_REVISION = "2024-10-15"
USER_AGENT = "pyklaviyo-python"
JSON_API_CONTENT_TYPE = "application/vnd.api+json"

# ------------------------------------------------------------------
# Helper defaults
# ------------------------------------------------------------------

DEFAULT_LOG_FILE = "klaviyo.log"
DEFAULT_NUM_RETRIES = 3
DEFAULT_USER_AGENT_SUFFIX = "KlaviyoHelper"
DEFAULT_CACHE_DIR = "cache"
DEFAULT_CACHE_TTL = 3600
DEFAULT_RATE_LIMIT = 10.0
DEFAULT_REQUEST_TIMEOUT = 30.0

# ------------------------------------------------------------------
# Cache
# ------------------------------------------------------------------

CACHE_SUFFIX = ".cache"
METRICS_CACHE_KEY = "metrics"
LISTS_CACHE_KEY = "lists"
PROFILES_CACHE_PREFIX = "profiles_"

# ------------------------------------------------------------------
# Subscriptions
# ------------------------------------------------------------------

SINGLE_SUBSCRIPTION_SOURCE = "Website Sign Up"
BATCH_SUBSCRIPTION_SOURCE = "Batch Import"

# ------------------------------------------------------------------
# Transport retries
# ------------------------------------------------------------------

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})
RETRY_BASE_DELAY = 0.5
RETRY_MAX_DELAY = 30.0
