"""
Claims platform access: HTTP client, error taxonomy and typed records.
"""
from claim_orch.services.upstream.client import (
    UpstreamClient,
    build_claims_client,
    build_notification_client,
)
from claim_orch.services.upstream.errors import (
    OrchestrationError,
    UpstreamHttpError,
    UpstreamLogicalError,
    CodeLookupError,
    UnexpectedResultCountError,
    NotificationError,
)

__all__ = [
    "UpstreamClient",
    "build_claims_client",
    "build_notification_client",
    "OrchestrationError",
    "UpstreamHttpError",
    "UpstreamLogicalError",
    "CodeLookupError",
    "UnexpectedResultCountError",
    "NotificationError",
]
