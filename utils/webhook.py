"""
HTTP client for the n8n webhooks.
Posts JSON payloads without blocking the event loop and normalizes the outcome.
"""

import asyncio
import functools
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
import requests

logger = logging.getLogger("discord_bot")


@dataclass(frozen=True)
class WebhookResult:
    ok: bool
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None


def build_headers(secret: str = None, subject: str = None) -> dict:
    """
    JSON headers, plus a short-lived HS256 bearer token when a secret is set.
    """
    headers = {'Content-Type': 'application/json'}
    if secret:
        claims = {'exp': datetime.now(timezone.utc) + timedelta(hours=1)}
        if subject:
            claims['sub'] = subject
        token = jwt.encode(claims, secret, algorithm='HS256')
        headers['Authorization'] = f'Bearer {token}'
    return headers


def _parse_body(response: requests.Response):
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(data, fallback: str) -> str:
    if isinstance(data, dict) and data.get('message'):
        return str(data['message'])
    return fallback or "Unknown error"


def _post(url: str, payload: dict, headers: dict, timeout) -> WebhookResult:
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
    except requests.Timeout:
        logger.error(f"Webhook timed out after {timeout}s: {url}")
        return WebhookResult(ok=False, error=f"Request timed out after {timeout}s")
    except requests.RequestException as e:
        logger.error(f"Error calling webhook: {e}")
        return WebhookResult(ok=False, error=str(e) or "Unknown error")

    logger.info(f"Webhook response status: {response.status_code}")
    data = _parse_body(response)

    if 200 <= response.status_code < 300:
        return WebhookResult(ok=True, status=response.status_code, data=data)

    reason = f"Request failed with status code {response.status_code}"
    logger.error(f"{reason}: {response.text[:500]}")
    return WebhookResult(
        ok=False,
        status=response.status_code,
        data=data,
        error=_error_message(data, reason),
    )


async def post_json(url: str, payload: dict, timeout: float = None,
                    secret: str = None, subject: str = None) -> WebhookResult:
    """
    POST ``payload`` as JSON to ``url``.

    HTTP and transport failures are returned as ``WebhookResult(ok=False)``
    rather than raised.
    """
    if not url:
        logger.error("Webhook URL is not configured")
        return WebhookResult(ok=False, error="Webhook URL is not configured")

    headers = build_headers(secret, subject)
    logger.info(f"Sending to N8N webhook: {url}")
    loop = asyncio.get_running_loop()
    call = loop.run_in_executor(
        None, functools.partial(_post, url, payload, headers, timeout)
    )
    if timeout is None:
        return await call

    # requests' timeout is per socket operation; this caps the whole call
    try:
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError:
        logger.error(f"Webhook timed out after {timeout}s: {url}")
        return WebhookResult(ok=False, error=f"Request timed out after {timeout}s")
