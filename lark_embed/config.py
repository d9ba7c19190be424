"""
Lark Embed BFF configuration. Secrets come from env (or a local .env); none in code.
"""
import os

from dotenv import load_dotenv

# Real environment wins over .env
load_dotenv(override=False)

# Lark / Feishu self-built app credentials
LARK_APP_ID = os.environ.get("LARK_APP_ID", "")
LARK_APP_SECRET = os.environ.get("LARK_APP_SECRET", "")

# Open platform API base. Feishu by default; https://open.larksuite.com for Lark international
LARK_DOMAIN = os.environ.get("LARK_DOMAIN", "https://open.feishu.cn").rstrip("/")

# Timeout (seconds) for each outbound open-platform call
LARK_HTTP_TIMEOUT = float(os.environ.get("LARK_HTTP_TIMEOUT", "10"))

# Fixed nonce used in the JS-SDK signature; the browser passes it back to h5sdk.config
NONCE_STR = "13oEviLbrTo458A3NjrOwS70oTOXVOAm"

# Holistics embed portal
EMBED_SECRET = os.environ.get("EMBED_SECRET", "")
EMBED_PORTAL_NAME = os.environ.get("EMBED_PORTAL_NAME", "")
EMBED_BASE = os.environ.get("EMBED_BASE", "")
EMBED_HASHCODE = os.environ.get("EMBED_HASHCODE", "")

# Origin the browser posts refresh_token messages to. Empty = derive from EMBED_BASE
EMBED_MESSAGE_ORIGIN = os.environ.get("EMBED_MESSAGE_ORIGIN", "").strip()

# Embed token lifetime (seconds)
EMBED_TOKEN_TTL_SECONDS = 15 * 60

# Browser refresh loop: check every minute, refresh when under 3 minutes left
EXP_CHECK_INTERVAL_MS = 60 * 1000
CRITICAL_TTL_MS = 3 * 60 * 1000

# Cookie session middleware is only installed when a secret is configured
SESSION_SECRET = os.environ.get("SESSION_SECRET", "")

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "3001"))
