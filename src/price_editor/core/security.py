"""Security utilities: editor nonces, client address and audit events."""

import hashlib
import hmac
import time
from typing import Any

from fastapi import Request
from loguru import logger

from src.price_editor.runtime.context import get_config

NONCE_ACTION = "wpe_price_editor_action"


def _nonce_secret() -> bytes:
    config = get_config()
    secret = config.app.nonce_signing_secret
    return secret.encode() if secret else b"dev-secret"


def generate_nonce(user_id: int, timestamp: int | None = None) -> str:
    """Generate an editor nonce bound to a user and an hour bucket.

    Args:
        user_id: Host user the nonce is issued to
        timestamp: Optional hour bucket (defaults to the current hour)

    Returns:
        HMAC-based nonce in the form ``<hour>:<digest>``
    """
    if timestamp is None:
        timestamp = int(time.time() // 3600)

    message = f"{NONCE_ACTION}:{user_id}:{timestamp}"
    digest = hmac.new(_nonce_secret(), message.encode(), hashlib.sha256).hexdigest()
    return f"{timestamp}:{digest}"


def verify_nonce(user_id: int, nonce: str | None, max_age_hours: int | None = None) -> bool:
    """Validate an editor nonce for a user.

    Args:
        user_id: Host user the request is made by
        nonce: Nonce sent by the client
        max_age_hours: Maximum age in hours (defaults to configuration)

    Returns:
        True if valid, False otherwise
    """
    if not nonce:
        return False

    if max_age_hours is None:
        max_age_hours = get_config().app.nonce_max_age_hours

    try:
        parts = nonce.split(":", 1)
        if len(parts) != 2:
            return False

        token_timestamp, token_value = parts
        timestamp = int(token_timestamp)

        current_hour = int(time.time() // 3600)
        if current_hour - timestamp > max_age_hours or timestamp > current_hour:
            return False

        expected_value = generate_nonce(user_id, timestamp).split(":", 1)[1]
        return hmac.compare_digest(expected_value.encode(), token_value.encode())

    except (ValueError, IndexError):
        return False


def get_client_ip(request: Request) -> str:
    """Best-effort client address, preferring proxy headers."""
    client_ip = request.headers.get("client-ip")
    if client_ip:
        return client_ip.strip()

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # Take first IP if comma-separated list
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host
    return ""


def log_event(
    event: str,
    request: Request | None = None,
    user_id: int | None = None,
    **context: Any,
) -> None:
    """Record an audit event when editor logging is enabled."""
    if not get_config().editor.enable_logging:
        return

    context["source"] = "price-editor"
    context["user_id"] = user_id
    if request is not None:
        context["ip"] = get_client_ip(request)

    logger.bind(event=event, **context).info(event)
