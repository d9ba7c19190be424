"""
Lark / Feishu open platform client.
JS-SDK config parameters (ticket + signature) and authorization-code login
(app token -> user token -> user info). No token caching, no retries.
"""
import json
import logging
import time

import httpx

from lark_embed.config import LARK_APP_ID, LARK_APP_SECRET, LARK_DOMAIN, LARK_HTTP_TIMEOUT, NONCE_STR
from lark_embed.errors import ConfigurationError, LarkAPIError
from lark_embed.signing import jsapi_signature

logger = logging.getLogger(__name__)

TENANT_ACCESS_TOKEN_PATH = "/open-apis/auth/v3/tenant_access_token/internal"
APP_ACCESS_TOKEN_PATH = "/open-apis/auth/v3/app_access_token/internal"
JSSDK_TICKET_PATH = "/open-apis/jssdk/ticket/get"
USER_ACCESS_TOKEN_PATH = "/open-apis/authen/v1/access_token"
USER_INFO_PATH = "/open-apis/authen/v1/user_info"


def _credentials() -> tuple[str, str]:
    if not LARK_APP_ID or not LARK_APP_SECRET:
        raise ConfigurationError("Please set LARK_APP_ID and LARK_APP_SECRET in your environment variables")
    return LARK_APP_ID, LARK_APP_SECRET


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _call(method: str, path: str, *, json_body: dict | None = None, headers: dict | None = None) -> dict:
    """Send one request to the open platform and return the decoded body. Transport errors become LarkAPIError."""
    url = f"{LARK_DOMAIN}{path}"
    logger.debug("Lark %s %s", method, path)
    try:
        if method == "GET":
            r = httpx.get(url, headers=headers, timeout=LARK_HTTP_TIMEOUT)
        else:
            r = httpx.post(url, json=json_body or {}, headers=headers, timeout=LARK_HTTP_TIMEOUT)
    except httpx.HTTPError as e:
        raise LarkAPIError(f"Request to {path} failed: {e}") from e
    try:
        return r.json()
    except ValueError as e:
        raise LarkAPIError(f"Non-JSON response from {path} (HTTP {r.status_code}): {r.text[:200]}") from e


def _failed(body: dict) -> bool:
    return body.get("code") != 0


def get_tenant_access_token() -> str:
    app_id, app_secret = _credentials()
    body = _call("POST", TENANT_ACCESS_TOKEN_PATH, json_body={"app_id": app_id, "app_secret": app_secret})
    if _failed(body) or not body.get("tenant_access_token"):
        raise LarkAPIError(f"Failed to get tenant access token: {json.dumps(body)}")
    return body["tenant_access_token"]


def get_app_access_token() -> str:
    app_id, app_secret = _credentials()
    body = _call("POST", APP_ACCESS_TOKEN_PATH, json_body={"app_id": app_id, "app_secret": app_secret})
    if _failed(body) or not body.get("app_access_token"):
        raise LarkAPIError(f"Failed to get app access token: {json.dumps(body)}")
    return body["app_access_token"]


def get_jsapi_ticket() -> str:
    """One-time JS-SDK ticket, authorized with the tenant access token."""
    tenant_token = get_tenant_access_token()
    body = _call("POST", JSSDK_TICKET_PATH, headers=_bearer(tenant_token))
    ticket = (body.get("data") or {}).get("ticket")
    if _failed(body) or not ticket:
        raise LarkAPIError(f"Failed to get jsapi ticket: {json.dumps(body)}")
    return ticket


def get_config_parameters(url: str) -> dict:
    """
    Parameters for h5sdk.config on the page at `url`.
    timestamp is in milliseconds; signature = SHA1(jsapi_ticket=..&noncestr=..&timestamp=..&url=..).
    """
    if not url:
        raise ValueError("url is required")
    app_id, _ = _credentials()
    ticket = get_jsapi_ticket()
    timestamp = int(time.time() * 1000)
    signature = jsapi_signature(ticket, NONCE_STR, timestamp, url)
    return {
        "appid": app_id,
        "ticket": ticket,
        "signature": signature,
        "noncestr": NONCE_STR,
        "timestamp": timestamp,
    }


def get_login_info(code: str) -> dict:
    """Exchange an authorization code for the user's profile. Fails fast at each of the three steps."""
    if not code:
        raise ValueError("code is required")
    app_token = get_app_access_token()

    body = _call(
        "POST",
        USER_ACCESS_TOKEN_PATH,
        json_body={"grant_type": "authorization_code", "code": code},
        headers=_bearer(app_token),
    )
    user_token = (body.get("data") or {}).get("access_token")
    if _failed(body) or not user_token:
        raise LarkAPIError(f"Failed to exchange code for user token: {json.dumps(body)}")

    body = _call("GET", USER_INFO_PATH, headers=_bearer(user_token))
    if _failed(body) or not body.get("data"):
        raise LarkAPIError(f"Failed to get user info: {json.dumps(body)}")
    return body["data"]


def get_app_id() -> str:
    return LARK_APP_ID
