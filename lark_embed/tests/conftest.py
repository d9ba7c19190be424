"""
Pytest configuration for lark_embed. Env is seeded before lark_embed.config is imported.
"""
import os

os.environ["LARK_APP_ID"] = "cli_test_app"
os.environ["LARK_APP_SECRET"] = "test-app-secret"
os.environ["LARK_DOMAIN"] = "https://open.feishu.example"
os.environ["EMBED_SECRET"] = "test-embed-secret"
os.environ["EMBED_PORTAL_NAME"] = "sales_portal"
os.environ["EMBED_BASE"] = "https://embed.holistics.example/embed/"
os.environ["EMBED_HASHCODE"] = "abc123hash"
os.environ["SESSION_SECRET"] = "test-session-secret"
# Derive the message origin from EMBED_BASE unless a test patches it
if "EMBED_MESSAGE_ORIGIN" in os.environ:
    del os.environ["EMBED_MESSAGE_ORIGIN"]
