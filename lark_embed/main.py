"""
Lark Embed BFF.
Signs JS-SDK config for the Lark web app, exchanges the auth code for the user profile,
and mints Holistics embed URLs for that user. Serves the browser client from ./static.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from lark_embed.config import (
    CRITICAL_TTL_MS,
    EXP_CHECK_INTERVAL_MS,
    HOST,
    LARK_APP_ID,
    LARK_APP_SECRET,
    LARK_DOMAIN,
    PORT,
    SESSION_SECRET,
)
from lark_embed.embed import create_embed_url, message_target_origin
from lark_embed.errors import ConfigurationError, LarkAPIError
from lark_embed.lark_client import get_app_id, get_config_parameters, get_login_info

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refuse to start without Lark app credentials."""
    if not LARK_APP_ID or not LARK_APP_SECRET:
        raise ConfigurationError("Please set LARK_APP_ID and LARK_APP_SECRET in your environment variables")
    logger.info("Lark Embed BFF starting: app_id=%s domain=%s", LARK_APP_ID, LARK_DOMAIN)
    yield


app = FastAPI(title="Lark Embed BFF", version="0.1.0", lifespan=lifespan)

if SESSION_SECRET:
    # Not read by any route yet; kept for server-side session state later
    app.add_middleware(
        SessionMiddleware,
        secret_key=SESSION_SECRET,
        session_cookie="sid",
        same_site="lax",
        https_only=False,
    )


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unmatched method on a known path falls through to the static mount; treat it as unmatched
    if exc.status_code in (404, 405):
        return _error("Route not found", 404)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return _error("Invalid request body. Expected a JSON object.", 400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error("Internal server error", 500)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}


@app.get("/get_config_parameters")
def config_parameters(url: str | None = None):
    """h5sdk.config parameters signed for the page URL."""
    if not url:
        return _error("URL parameter is required", 400)
    try:
        return get_config_parameters(url)
    except (LarkAPIError, ConfigurationError) as e:
        logger.error("Config parameters error: %s", e)
        return _error(str(e), 500)


@app.get("/get_user_info")
def user_info(code: str | None = None):
    """Exchange the Lark authorization code for the user's profile."""
    if not code:
        return _error("Authorization code is required", 400)
    try:
        return get_login_info(code)
    except (LarkAPIError, ConfigurationError) as e:
        logger.error("User info error: %s", e)
        return _error(str(e), 500)


@app.get("/get_app_id", response_class=PlainTextResponse)
def app_id():
    return PlainTextResponse(get_app_id())


@app.get("/get_client_settings")
def client_settings():
    """Refresh timing and postMessage target origin for the browser client."""
    return {
        "embedOrigin": message_target_origin(),
        "expCheckIntervalMs": EXP_CHECK_INTERVAL_MS,
        "criticalTtlMs": CRITICAL_TTL_MS,
    }


@app.post("/api/embed-url")
def embed_url(body: dict | None = Body(None)):
    """
    Signed embed URL for the caller-supplied userInfo (as returned by /get_user_info).
    The authorization code is not re-verified here.
    """
    user_info = (body or {}).get("userInfo")
    if user_info is None:
        return _error("Missing user info. Please provide 'userInfo' parameter.", 400)
    if not isinstance(user_info, dict):
        return _error("'userInfo' must be an object.", 400)
    try:
        return create_embed_url({"email": user_info.get("email") or ""})
    except ConfigurationError as e:
        logger.error("Embed URL generation error: %s", e)
        return _error(str(e), 500)


# Last: catches every path not matched above
app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "lark_embed.main:app",
        host=HOST,
        port=PORT,
        reload=True,
    )
