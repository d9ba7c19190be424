"""
Holistics embed token and URL building.
Token is an HS256 JWT scoped to one user's email; valid for EMBED_TOKEN_TTL_SECONDS.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import quote, urlsplit

from lark_embed.config import (
    EMBED_BASE,
    EMBED_HASHCODE,
    EMBED_MESSAGE_ORIGIN,
    EMBED_PORTAL_NAME,
    EMBED_SECRET,
    EMBED_TOKEN_TTL_SECONDS,
)
from lark_embed.errors import ConfigurationError
from lark_embed.signing import sign_embed_token

logger = logging.getLogger(__name__)

EMBED_OBJECT_TYPE = "EmbedPortal"


@dataclass
class EmbedToken:
    token: str
    exp: int


def _embed_settings() -> dict:
    # No exports, no timezone switching for embedded viewers
    return {
        "allow_raw_data_export": False,
        "allow_dashboard_export": False,
        "default_timezone": None,
        "allow_dashboard_timezone_change": False,
        "hide_dashboard_filters_controls_panel": False,
    }


def build_embed_token(email: str) -> EmbedToken:
    """Sign a portal token for this email. Raises ConfigurationError if secret or portal name is unset."""
    if not EMBED_SECRET:
        raise ConfigurationError("Missing EMBED_SECRET")
    if not EMBED_PORTAL_NAME:
        raise ConfigurationError("Missing EMBED_PORTAL_NAME")

    now = int(datetime.now(timezone.utc).timestamp())
    payload = {
        "object_name": EMBED_PORTAL_NAME,
        "object_type": EMBED_OBJECT_TYPE,
        "user_attributes": {"email": email},
        "permissions": {},
        "exp": now + EMBED_TOKEN_TTL_SECONDS,
        "settings": _embed_settings(),
    }
    token = sign_embed_token(payload, EMBED_SECRET)
    return EmbedToken(token=token, exp=payload["exp"])


def generate_embed_url(user_attributes: dict, token: str, exp: int) -> dict:
    """
    {url, token, exp, userAttributes}. URL is EMBED_BASE/EMBED_HASHCODE?_token=...;
    base and path are not validated.
    """
    base = EMBED_BASE[:-1] if EMBED_BASE.endswith("/") else EMBED_BASE
    url = f"{base}/{EMBED_HASHCODE}?_token={quote(token, safe='')}"
    return {
        "url": url,
        "token": token,
        "exp": exp,
        "userAttributes": user_attributes,
    }


def create_embed_url(user_attributes: dict) -> dict:
    email = user_attributes.get("email") or ""
    embed_token = build_embed_token(email)
    logger.info("Issued embed token for portal=%s exp=%s", EMBED_PORTAL_NAME, embed_token.exp)
    return generate_embed_url({"email": email}, embed_token.token, embed_token.exp)


def message_target_origin() -> str:
    """Origin for refresh_token postMessage: explicit setting, else the embed host, else '*'."""
    if EMBED_MESSAGE_ORIGIN:
        return EMBED_MESSAGE_ORIGIN
    parts = urlsplit(EMBED_BASE)
    if parts.scheme and parts.netloc:
        return f"{parts.scheme}://{parts.netloc}"
    logger.warning("EMBED_BASE not set; refresh messages will target any origin")
    return "*"
