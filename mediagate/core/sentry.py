"""Sentry error tracking.

Enabled only when SENTRY_DSN is set. Events are scrubbed of vendor credentials
(auth headers and the ``key`` query parameter) before they leave the process.
"""

import logging

from mediagate.core.config import settings
from mediagate.core.logging import redact

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {"authorization", "x-api-key", "xi-api-key", "cookie"}


def scrub_event(event: dict, hint: dict | None = None) -> dict:
    """``before_send`` hook: mask credential headers and redact URLs/messages."""
    request = event.get("request") or {}
    headers = request.get("headers")
    if isinstance(headers, dict):
        request["headers"] = {k: "***" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}
    if isinstance(request.get("url"), str):
        request["url"] = redact(request["url"])
    if isinstance(request.get("query_string"), str):
        request["query_string"] = redact(f"?{request['query_string']}")[1:]

    logentry = event.get("logentry") or {}
    if isinstance(logentry.get("message"), str):
        logentry["message"] = redact(logentry["message"])
    for exc in (event.get("exception") or {}).get("values", []):
        if isinstance(exc.get("value"), str):
            exc["value"] = redact(exc["value"])
    return event


def init_sentry() -> None:
    if not settings.sentry_dsn:
        logger.debug("Sentry DSN not configured, skipping")
        return

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        traces_sample_rate=0.1 if settings.app_env == "production" else 1.0,
        send_default_pii=False,
        before_send=scrub_event,
        integrations=[FastApiIntegration(transaction_style="endpoint")],
    )
    logger.info("Sentry initialized (env=%s)", settings.app_env)
