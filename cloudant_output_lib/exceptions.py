"""
Custom exception hierarchy for the Cloudant output library.

All public exceptions inherit from :class:`CloudantOutputError`, allowing
callers to catch a single base class for any bridge‑related failure while
still being able to differentiate specific error conditions when needed.
"""

from typing import Any


class CloudantOutputError(Exception):
    """Base exception for all Cloudant‑output‑specific errors."""

    pass


class ConfigError(CloudantOutputError):
    """Raised when a mandatory option is missing or an option value is invalid."""

    pass


class CredentialError(CloudantOutputError):
    """Raised when the API key cannot be read from its configured source."""

    pass


class NormalizationError(CloudantOutputError):
    """Raised when a decoded record cannot be converted to a JSON‑safe document."""

    pass


class NonStringKeyError(NormalizationError):
    """Raised when a mapping inside a record uses a key that is not a ``str``."""

    def __init__(self, key: Any):
        super().__init__(f"non-string key found: {key!r}")
        self.key = key


class UnsupportedValueError(NormalizationError):
    """Raised when a record holds a value outside the supported value types."""

    def __init__(self, value: Any):
        super().__init__(f"unsupported value type: {type(value).__name__}")
        self.value = value


class NestingTooDeepError(NormalizationError):
    """Raised when a record nests mappings and sequences beyond the allowed depth."""

    def __init__(self, limit: int):
        super().__init__(f"record nested deeper than {limit} levels")
        self.limit = limit


class StoreError(CloudantOutputError):
    """Raised when the document store rejects a document or cannot be reached."""

    pass


class AuthenticationError(StoreError):
    """Raised on HTTP 401/403 or when an IAM token cannot be obtained."""

    pass


class RateLimitError(StoreError):
    """Raised when the server returns HTTP 429 – request rate limit exceeded."""

    pass
