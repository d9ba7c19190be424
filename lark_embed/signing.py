"""
Signing helpers: JS-SDK config signature (SHA1) and Holistics embed token (HS256 JWT).
"""
import hashlib

import jwt

EMBED_TOKEN_ALGORITHM = "HS256"


def jsapi_signature(ticket: str, noncestr: str, timestamp: int, url: str) -> str:
    """SHA1 hex digest over the canonical jsapi_ticket/noncestr/timestamp/url string."""
    raw = f"jsapi_ticket={ticket}&noncestr={noncestr}&timestamp={timestamp}&url={url}"
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def sign_embed_token(payload: dict, secret: str) -> str:
    return jwt.encode(payload, secret, algorithm=EMBED_TOKEN_ALGORITHM)


def decode_embed_token(token: str, secret: str) -> dict:
    """Verify signature and exp; raises jwt.InvalidTokenError on failure."""
    return jwt.decode(token, secret, algorithms=[EMBED_TOKEN_ALGORITHM])
