"""Dispatcher — credential resolution and adapter selection for one media kind.

Adapter errors are not caught here; the gateway endpoint is the single place
where errors become HTTP responses.
"""

from __future__ import annotations

import logging
import time

from mediagate.core.credentials import CredentialResolver
from mediagate.core.metrics import VENDOR_LATENCY
from mediagate.gateway.errors import CredentialError
from mediagate.gateway.registry import AdapterRegistry
from mediagate.gateway.types import GenerationResult, Payload

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(self, registry: AdapterRegistry, credentials: CredentialResolver):
        self.registry = registry
        self.credentials = credentials

    async def dispatch(self, provider: str, model: str, payload: Payload) -> GenerationResult:
        """Route one call.

        Raises CredentialError (before any outbound call) when no key is
        configured for ``provider``; otherwise propagates the adapter's error.
        """
        credential = self.credentials.resolve(provider)
        if not credential:
            raise CredentialError(provider)

        selection = self.registry.select(provider)
        adapter = selection.adapter
        logger.info(
            "Dispatching %s request provider=%s model=%s adapter=%s%s",
            self.registry.kind.value,
            provider,
            model,
            adapter.name,
            " (fallback)" if selection.is_fallback else "",
            extra={"kind": self.registry.kind.value, "provider": provider, "adapter": adapter.name},
        )

        start = time.perf_counter()
        try:
            # The raw provider id goes through so fallbacks can derive a base URL from it
            return await adapter.invoke(credential, model, payload, provider=provider)
        finally:
            VENDOR_LATENCY.labels(kind=self.registry.kind.value, adapter=adapter.name).observe(
                time.perf_counter() - start
            )
