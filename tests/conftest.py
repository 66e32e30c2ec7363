"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import main` to work when running
tests, simulating the Lambda environment where code is deployed from the
src/ directory.
"""

import os
import sys
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where Code.from_asset("src") makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly AWS defaults so boto3 never needs real credentials.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

# Lambda environment variables used by the relay.
os.environ.setdefault("DESK_DOMAIN", "desk.example.com")
os.environ.setdefault("DESK_ORG_ID", "org-123")
os.environ.setdefault("TOKEN_SERVICE_URL", "https://token.example.com")
os.environ.setdefault("COMMERCE_API_URL", "https://shop.example.com/rest/V1")
os.environ.setdefault("COMMERCE_API_TOKEN", "commerce-token")
os.environ.setdefault("ALLOWED_ORIGINS", "https://www.example.com,https://help.example.com")
os.environ.setdefault("DISPATCH_MODE", "sync")
os.environ.setdefault("TICKET_CHANNEL", "form")

boto3.setup_default_session(region_name="eu-west-2")

TOKEN_URL = "https://token.example.com/token"
TICKET_URL = "https://desk.example.com/api/v1/tickets"
COMMERCE_HOST = "shop.example.com"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reload settings and drop lazily created services between tests."""
    from config import settings
    from handlers import ticket_submission
    from services import dispatcher

    settings.reset_settings()
    ticket_submission._ticket_service = None
    dispatcher._dispatcher = None
    yield
    settings.reset_settings()
    ticket_submission._ticket_service = None
    dispatcher._dispatcher = None


def api_event(method="POST", path="/tickets", body=None, headers=None):
    """Build a minimal API Gateway HTTP API (v2) event."""
    return {
        "version": "2.0",
        "rawPath": path,
        "headers": headers or {},
        "requestContext": {"http": {"method": method, "path": path}},
        "body": body,
        "isBase64Encoded": False,
    }
