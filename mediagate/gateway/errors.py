"""Gateway error taxonomy.

Adapters and the dispatcher raise these; only the gateway endpoint turns them
into HTTP responses (``http_status`` + ``{"error": message}``).
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class. ``source_status`` is the upstream HTTP status, when there was one."""

    http_status: int = 500

    def __init__(self, message: str, source_status: int | None = None):
        super().__init__(message)
        self.message = message
        self.source_status = source_status


class ValidationError(GatewayError):
    """Missing or malformed request field."""

    http_status = 400


class CredentialError(GatewayError):
    """No credential resolvable for the requested provider."""

    http_status = 401

    def __init__(self, provider: str):
        super().__init__(f"API key not configured for {provider}")
        self.provider = provider


UnknownCredentialError = CredentialError


class VendorError(GatewayError):
    """Upstream call completed with a non-success status."""

    def __init__(self, vendor: str, body: str, status: int | None = None):
        super().__init__(f"{vendor} API error: {body}", source_status=status)
        self.vendor = vendor
        self.body = body
        self.status = status


class MalformedResponseError(VendorError):
    """Upstream returned success, but not in a shape the adapter understands."""


class TransportError(GatewayError):
    """Upstream call could not be completed (DNS, connection reset, timeout)."""

    def __init__(self, vendor: str, detail: str):
        super().__init__(f"{vendor} request failed: {detail}")
        self.vendor = vendor


class GenerationFailedError(GatewayError):
    """A vendor job reported failure, or never finished within the polling budget."""
