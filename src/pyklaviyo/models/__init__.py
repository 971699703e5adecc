"""Data models for pyklaviyo inputs and results."""

from pyklaviyo.models._base import KlaviyoRequestModel, parse_request
from pyklaviyo.models.batch import BatchFailureKind, BatchItemResult, BatchResult
from pyklaviyo.models.cache import CacheEntry
from pyklaviyo.models.filters import FilterClause, FilterOperator, LogicalOperator
from pyklaviyo.models.requests import (
    PROFILE_IDENTIFIER_FIELDS,
    ProfileAttributes,
    SubscriptionRequest,
    TrackEventRequest,
    WebhookRegistrationRequest,
)
from pyklaviyo.models.webhook import UNKNOWN_WEBHOOK_TYPE, WebhookEnvelope

__all__ = [
    "BatchFailureKind",
    "BatchItemResult",
    "BatchResult",
    "CacheEntry",
    "FilterClause",
    "FilterOperator",
    "KlaviyoRequestModel",
    "LogicalOperator",
    "PROFILE_IDENTIFIER_FIELDS",
    "ProfileAttributes",
    "SubscriptionRequest",
    "TrackEventRequest",
    "UNKNOWN_WEBHOOK_TYPE",
    "WebhookEnvelope",
    "WebhookRegistrationRequest",
    "parse_request",
]
