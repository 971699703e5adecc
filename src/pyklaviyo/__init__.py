"""pyklaviyo - Async helper around the Klaviyo marketing API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyklaviyo")
except PackageNotFoundError:
    __version__ = "0+local"
from pyklaviyo._cache import FileCache
from pyklaviyo._rate_limit import RateLimiter
from pyklaviyo._webhook import WebhookProcessor, WebhookRouter
from pyklaviyo.client import KlaviyoClient
from pyklaviyo.config import KlaviyoConfig
from pyklaviyo.exceptions import (
    KlaviyoApiError,
    KlaviyoAuthenticationError,
    KlaviyoCacheError,
    KlaviyoConfigError,
    KlaviyoDecodeError,
    KlaviyoError,
    KlaviyoRateLimitError,
    KlaviyoSignatureNotImplementedError,
    KlaviyoTransportError,
    KlaviyoUpstreamError,
    KlaviyoValidationError,
)
from pyklaviyo.models import (
    BatchFailureKind,
    BatchItemResult,
    BatchResult,
    CacheEntry,
    FilterClause,
    FilterOperator,
    LogicalOperator,
    WebhookEnvelope,
)

__all__ = [
    "__version__",
    "BatchFailureKind",
    "BatchItemResult",
    "BatchResult",
    "CacheEntry",
    "FileCache",
    "FilterClause",
    "FilterOperator",
    "KlaviyoApiError",
    "KlaviyoAuthenticationError",
    "KlaviyoCacheError",
    "KlaviyoClient",
    "KlaviyoConfig",
    "KlaviyoConfigError",
    "KlaviyoDecodeError",
    "KlaviyoError",
    "KlaviyoRateLimitError",
    "KlaviyoSignatureNotImplementedError",
    "KlaviyoTransportError",
    "KlaviyoUpstreamError",
    "KlaviyoValidationError",
    "LogicalOperator",
    "RateLimiter",
    "WebhookEnvelope",
    "WebhookProcessor",
    "WebhookRouter",
]
