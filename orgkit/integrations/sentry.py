# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   1. Create a Python project at sentry.io
#   2. Copy DSN to .env: SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   init_sentry() is called by the app lifespan (orgkit/api/app.py)
#
# =============================================================================

import logging

import sentry_sdk
from fastapi import HTTPException
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from orgkit.config import Settings, get_settings

logger = logging.getLogger(__name__)


# Expected outcomes, not errors
IGNORED_STATUS_CODES = (401, 403, 404, 422)


def init_sentry(settings: Settings | None = None) -> bool:
    """
    Initialize Sentry error tracking.
    
    Returns True if initialized, False if skipped.
    """
    settings = settings or get_settings()
    
    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False
    
    sensitive_headers = _sensitive_headers(settings)
    
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        
        # Don't send PII by default
        send_default_pii=False,
        
        before_send=lambda event, hint: _filter_events(event, hint, sensitive_headers),
    )
    
    logger.info(f"Sentry initialized for {settings.environment}")
    return True


def _sensitive_headers(settings: Settings) -> set[str]:
    return {"authorization", "cookie", settings.active_organization_header.lower()}


def _filter_events(event: dict, hint: dict, sensitive_headers: set[str]) -> dict | None:
    """Drop expected HTTP errors and scrub credentials from requests."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        if isinstance(exc_value, HTTPException) and exc_value.status_code in IGNORED_STATUS_CODES:
            return None
    
    headers = event.get("request", {}).get("headers")
    if headers:
        for key in list(headers.keys()):
            if key.lower() in sensitive_headers:
                headers[key] = "[Filtered]"
    
    return event
