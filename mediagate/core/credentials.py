"""Credential resolution for vendor calls.

The gateway never stores credentials. It asks a resolver for one secret per
call, keyed by the provider identifier from the request.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Protocol

from mediagate.core.config import CREDENTIAL_ENV_SUFFIX


class CredentialResolver(Protocol):
    """Anything that can map a provider id to a secret (or ``None``)."""

    def resolve(self, provider: str) -> str | None: ...


def credential_env_var(provider: str) -> str:
    """Environment variable holding the key for ``provider``: ``openai`` → ``OPENAI_API_KEY``."""
    return f"{provider.upper()}{CREDENTIAL_ENV_SUFFIX}"


class EnvCredentialResolver:
    """Reads ``<PROVIDER_UPPERCASE>_API_KEY`` from the process environment."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ if environ is not None else os.environ

    def resolve(self, provider: str) -> str | None:
        value = self._environ.get(credential_env_var(provider), "")
        return value.strip() or None


class StaticCredentialResolver:
    """Fixed provider → key mapping (BYOK callers, tests). Lookup is case-insensitive."""

    def __init__(self, keys: Mapping[str, str]):
        self._keys = {provider.lower(): key for provider, key in keys.items() if key}

    def resolve(self, provider: str) -> str | None:
        return self._keys.get(provider.lower())
