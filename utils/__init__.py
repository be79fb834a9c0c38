"""
Utils package for the Discord bots.
"""

from .config import (
    TOKEN, CLIENT_ID, PREFIX, N8N_WEBHOOK_URL, N8N_WEBHOOK, JWT_SECRET, CHANNEL_ID,
    FORWARD_TIMEOUT, SEARCH_TIMEOUT, SESSION_TTL, PORT,
    ConfigError, validate_forwarder_config, validate_search_config,
)
from .logger_config import setup_logger
from .webhook import post_json, WebhookResult
from .health_server import HealthServer

__all__ = [
    'TOKEN',
    'CLIENT_ID',
    'PREFIX',
    'N8N_WEBHOOK_URL',
    'N8N_WEBHOOK',
    'JWT_SECRET',
    'CHANNEL_ID',
    'FORWARD_TIMEOUT',
    'SEARCH_TIMEOUT',
    'SESSION_TTL',
    'PORT',
    'ConfigError',
    'validate_forwarder_config',
    'validate_search_config',
    'setup_logger',
    'post_json',
    'WebhookResult',
    'HealthServer',
]
