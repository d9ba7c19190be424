"""Tests for embed token claims and embed URL building."""
import time
from unittest.mock import patch
from urllib.parse import quote

import pytest

from lark_embed.embed import (
    build_embed_token,
    create_embed_url,
    generate_embed_url,
    message_target_origin,
)
from lark_embed.errors import ConfigurationError
from lark_embed.signing import decode_embed_token

SECRET = "test-embed-secret"


def test_embed_token_claims():
    now = int(time.time())
    result = build_embed_token("alice@example.com")
    claims = decode_embed_token(result.token, SECRET)
    assert claims["object_name"] == "sales_portal"
    assert claims["object_type"] == "EmbedPortal"
    assert claims["user_attributes"] == {"email": "alice@example.com"}
    assert claims["permissions"] == {}
    assert now + 899 <= claims["exp"] <= now + 901
    assert claims["exp"] == result.exp


def test_embed_token_settings_disable_exports():
    claims = decode_embed_token(build_embed_token("bob@example.com").token, SECRET)
    settings = claims["settings"]
    assert settings["allow_raw_data_export"] is False
    assert settings["allow_dashboard_export"] is False
    assert settings["allow_dashboard_timezone_change"] is False
    assert settings["hide_dashboard_filters_controls_panel"] is False
    assert settings["default_timezone"] is None


def test_missing_secret_raises():
    with patch("lark_embed.embed.EMBED_SECRET", ""):
        with pytest.raises(ConfigurationError, match="EMBED_SECRET"):
            build_embed_token("a@example.com")


def test_missing_portal_name_raises():
    with patch("lark_embed.embed.EMBED_PORTAL_NAME", ""):
        with pytest.raises(ConfigurationError, match="EMBED_PORTAL_NAME"):
            build_embed_token("a@example.com")


def test_create_embed_url_exact_url():
    """Configured base has a trailing slash; it must not be doubled."""
    result = create_embed_url({"email": "carol@example.com"})
    expected = f"https://embed.holistics.example/embed/abc123hash?_token={quote(result['token'], safe='')}"
    assert result["url"] == expected
    assert result["userAttributes"] == {"email": "carol@example.com"}
    claims = decode_embed_token(result["token"], SECRET)
    assert claims["user_attributes"]["email"] == "carol@example.com"
    assert claims["exp"] == result["exp"]


def test_create_embed_url_missing_email_uses_empty_string():
    result = create_embed_url({"name": "No Email"})
    assert result["userAttributes"] == {"email": ""}
    assert decode_embed_token(result["token"], SECRET)["user_attributes"]["email"] == ""


def test_generate_embed_url_without_trailing_slash():
    with patch("lark_embed.embed.EMBED_BASE", "https://bi.example/embed"), patch(
        "lark_embed.embed.EMBED_HASHCODE", "h1"
    ):
        out = generate_embed_url({"email": "x@example.com"}, "a.b.c", 123)
    assert out == {
        "url": "https://bi.example/embed/h1?_token=a.b.c",
        "token": "a.b.c",
        "exp": 123,
        "userAttributes": {"email": "x@example.com"},
    }


def test_generate_embed_url_unconfigured_base_does_not_raise():
    with patch("lark_embed.embed.EMBED_BASE", ""), patch("lark_embed.embed.EMBED_HASHCODE", ""):
        out = generate_embed_url({}, "tok", 1)
    assert out["url"] == "/?_token=tok"


def test_message_target_origin_from_base():
    assert message_target_origin() == "https://embed.holistics.example"


def test_message_target_origin_explicit():
    with patch("lark_embed.embed.EMBED_MESSAGE_ORIGIN", "https://custom.example"):
        assert message_target_origin() == "https://custom.example"


def test_message_target_origin_wildcard_when_unset():
    with patch("lark_embed.embed.EMBED_BASE", ""):
        assert message_target_origin() == "*"
