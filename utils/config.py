"""
Configuration module for the Discord bots.
"""

import os
from dotenv import load_dotenv

load_dotenv()


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


# Malformed numeric settings, by variable name. Reported by the validators
# so each bot's main() can log them and exit instead of failing on import.
INVALID_SETTINGS = {}


def _int_env(name: str, default=None):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        INVALID_SETTINGS[name] = f"{name} must be an integer, got {value!r}"
        return default


def _float_env(name: str, default=None):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        INVALID_SETTINGS[name] = f"{name} must be a number, got {value!r}"
        return default


def _check_invalid(names, invalid=None) -> None:
    invalid = INVALID_SETTINGS if invalid is None else invalid
    errors = [invalid[name] for name in names if name in invalid]
    if errors:
        raise ConfigError("; ".join(errors))


# Discord Configuration
TOKEN = os.getenv("DISCORD_TOKEN")
CLIENT_ID = _int_env("DISCORD_CLIENT_ID")
PREFIX = "!"

# N8N Webhook Configuration
N8N_WEBHOOK_URL = os.getenv("N8N_WEBHOOK_URL") or os.getenv("N8N_WEBHOOK")
N8N_WEBHOOK = os.getenv("N8N_WEBHOOK") or os.getenv("N8N_WEBHOOK_URL")
JWT_SECRET = os.getenv("JWT_SECRET")

# Forwarder
CHANNEL_ID = os.getenv("CHANNEL_ID")
FORWARD_TIMEOUT = _float_env("FORWARD_TIMEOUT_SECONDS")

# Search flow
SEARCH_TIMEOUT = 30  # seconds
SESSION_TTL = _int_env("SESSION_TTL_SECONDS", 900)

# Health check server
PORT = _int_env("PORT", 3000)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_forwarder_config(token=None, webhook=None, channel_id=None, invalid=None) -> int:
    """
    Check the forwarder's required settings.

    Returns:
        The target channel id as an int.

    Raises:
        ConfigError: listing every missing variable, or on a non-numeric
            CHANNEL_ID, PORT or FORWARD_TIMEOUT_SECONDS.
    """
    _check_invalid(("PORT", "FORWARD_TIMEOUT_SECONDS"), invalid)

    token = TOKEN if token is None else token
    webhook = N8N_WEBHOOK if webhook is None else webhook
    channel_id = CHANNEL_ID if channel_id is None else channel_id

    missing = []
    if not token:
        missing.append("DISCORD_TOKEN")
    if not webhook:
        missing.append("N8N_WEBHOOK")
    if not channel_id:
        missing.append("CHANNEL_ID")
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}")

    try:
        return int(str(channel_id).strip())
    except ValueError:
        raise ConfigError(f"CHANNEL_ID must be a numeric id, got {channel_id!r}")


def validate_search_config(token=None, invalid=None) -> None:
    """The search bot only refuses to start without a token or on malformed numbers."""
    _check_invalid(("DISCORD_CLIENT_ID", "PORT", "SESSION_TTL_SECONDS"), invalid)
    token = TOKEN if token is None else token
    if not token:
        raise ConfigError("Missing required environment variable: DISCORD_TOKEN")
