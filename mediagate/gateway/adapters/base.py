"""Shared adapter contract and HTTP plumbing.

Every vendor adapter implements ``invoke(credential, model, payload, provider=...)``
and returns one fully populated result variant. Failures are raised, never
returned:

  - non-success HTTP status → VendorError("<Vendor> API error: <body>")
  - network failure/timeout → TransportError
  - success body of the wrong shape → MalformedResponseError
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx

from mediagate.gateway.errors import MalformedResponseError, TransportError, VendorError
from mediagate.gateway.types import GenerationResult, MediaKind, Payload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class BaseVendorAdapter(ABC):
    """Base class for all vendor adapters.

    ``name`` labels the adapter in logs and metrics; ``vendor_name`` is the
    human-readable vendor used in error messages.
    """

    name: str
    vendor_name: str
    kind: MediaKind

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, **kwargs):
        self.timeout = timeout

    @abstractmethod
    async def invoke(self, credential: str, model: str, payload: Payload, *, provider: str) -> GenerationResult:
        """Call the vendor and return a normalized result.

        ``provider`` is the identifier exactly as the caller sent it; fallback
        adapters use it to pick a base URL and to label the result.
        """
        ...

    def vendor_label(self, provider: str) -> str:
        return self.vendor_name

    # -- HTTP ---------------------------------------------------------------

    async def _post(self, url: str, *, vendor: str, **kwargs: Any) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s POST failed: %s", vendor, type(e).__name__)
            raise TransportError(vendor, str(e) or type(e).__name__) from e
        self._raise_for_vendor(resp, vendor)
        return resp

    async def _get(self, url: str, *, vendor: str, **kwargs: Any) -> httpx.Response:
        """GET without status checking; pollers decide what a non-success means."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.get(url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s GET failed: %s", vendor, type(e).__name__)
            raise TransportError(vendor, str(e) or type(e).__name__) from e

    @staticmethod
    def _raise_for_vendor(resp: httpx.Response, vendor: str) -> None:
        if resp.is_success:
            return
        body = resp.text
        logger.warning("%s returned HTTP %d", vendor, resp.status_code)
        raise VendorError(vendor, body, status=resp.status_code)

    @staticmethod
    def _json(resp: httpx.Response, vendor: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(vendor, "response is not valid JSON", status=resp.status_code) from e

    @staticmethod
    @contextmanager
    def _response_shape(vendor: str) -> Iterator[None]:
        """Turn lookups into a body of the wrong shape into MalformedResponseError."""
        try:
            yield
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise MalformedResponseError(vendor, f"unexpected response shape ({e!r})") from e

    @staticmethod
    def _job_id(value: Any, vendor: str) -> str:
        """Job or task identifier from a vendor body; null or blank is malformed."""
        if value is None or isinstance(value, (dict, list)) or not str(value).strip():
            raise MalformedResponseError(vendor, f"missing job identifier ({value!r})")
        return str(value).strip()

    @staticmethod
    def _bearer(credential: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {credential}", "Content-Type": "application/json"}


class OpenAICompatibleMixin:
    """Base-URL resolution for vendors that speak the OpenAI contract.

    Known vendors map to their documented base URL; anything else is assumed
    to live at ``https://api.<provider>.com/v1``.
    """

    known_endpoints: dict[str, str] = {}

    def base_url(self, provider: str) -> str:
        key = provider.lower()
        return self.known_endpoints.get(key) or f"https://api.{key}.com/v1"

    def vendor_label(self, provider: str) -> str:
        return provider
