"""Generation Gateway — the single error-to-response translation point.

Per call:
  1. Parse and validate the body (→ 400)
  2. Resolve the provider credential (→ 401), inside the dispatcher
  3. Dispatch to the vendor adapter (any failure → 500)
  4. Serialize the normalized result (→ 200)

Usage:
    gateway = GenerationGateway(build_registries(settings, store), EnvCredentialResolver())
    reply = await gateway.handle(MediaKind.IMAGE, raw_body)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from mediagate.core.credentials import CredentialResolver
from mediagate.core.metrics import GENERATION_OUTCOMES
from mediagate.gateway.dispatcher import Dispatcher
from mediagate.gateway.errors import GatewayError
from mediagate.gateway.registry import AdapterRegistry
from mediagate.gateway.types import GatewayReply, MediaKind
from mediagate.schemas.generation import parse_generation_request

logger = logging.getLogger(__name__)


class GenerationGateway:
    def __init__(self, registries: Mapping[MediaKind, AdapterRegistry], credentials: CredentialResolver):
        self.registries = dict(registries)
        self.credentials = credentials
        self.dispatchers = {kind: Dispatcher(registry, credentials) for kind, registry in self.registries.items()}

    async def handle(self, kind: MediaKind, raw_body: bytes) -> GatewayReply:
        adapter_name = "none"
        try:
            request = parse_generation_request(kind, raw_body)
            adapter_name = self.registries[kind].select(request.provider).adapter.name
            result = await self.dispatchers[kind].dispatch(request.provider, request.model, request.payload)
        except GatewayError as e:
            if e.http_status >= 500:
                logger.warning("%s generation failed (%s): %s", kind.value, type(e).__name__, e.message)
            else:
                logger.info("%s request rejected (%d): %s", kind.value, e.http_status, e.message)
            GENERATION_OUTCOMES.labels(kind=kind.value, adapter=adapter_name, outcome=type(e).__name__).inc()
            return GatewayReply(status_code=e.http_status, body={"error": e.message})
        except Exception as e:
            logger.exception("Unhandled error in %s generation", kind.value)
            GENERATION_OUTCOMES.labels(kind=kind.value, adapter=adapter_name, outcome="unhandled").inc()
            return GatewayReply(status_code=500, body={"error": str(e) or type(e).__name__})

        GENERATION_OUTCOMES.labels(kind=kind.value, adapter=adapter_name, outcome="success").inc()
        return GatewayReply(status_code=200, body=result.to_dict())

    def provider_status(self) -> dict[str, list[dict]]:
        """Registered providers per kind and whether a credential is configured."""
        return {
            kind.value: [
                {
                    "provider": provider,
                    "adapter": registry.select(provider).adapter.name,
                    "configured": bool(self.credentials.resolve(provider)),
                }
                for provider in registry.providers
            ]
            for kind, registry in self.registries.items()
        }
