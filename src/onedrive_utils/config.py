"""Centralized credential configuration.

Credentials come from the environment. A `.env` file in the onedrive-utils
repo root is loaded on import, without overriding variables that are
already set:

    ONEDRIVE_CLIENT_ID      - Azure app registration (client) ID
    ONEDRIVE_CLIENT_SECRET  - Client secret value
    ONEDRIVE_REFRESH_TOKEN  - Long-lived refresh token
    ONEDRIVE_REDIRECT_URI   - Redirect URI registered for the app
    ONEDRIVE_DRIVE_ID       - Drive ID (optional, requests use me/drive)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from onedrive_utils.microsoft.exceptions import CredentialsNotFoundError

# __file__ is src/onedrive_utils/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
ENV_FILE = REPO_ROOT / ".env"

ENV_CLIENT_ID = "ONEDRIVE_CLIENT_ID"
ENV_CLIENT_SECRET = "ONEDRIVE_CLIENT_SECRET"
ENV_REFRESH_TOKEN = "ONEDRIVE_REFRESH_TOKEN"
ENV_REDIRECT_URI = "ONEDRIVE_REDIRECT_URI"
ENV_DRIVE_ID = "ONEDRIVE_DRIVE_ID"

REQUIRED_VARS = (ENV_CLIENT_ID, ENV_CLIENT_SECRET, ENV_REFRESH_TOKEN, ENV_REDIRECT_URI)


@dataclass(frozen=True)
class Credentials:
    """OAuth client credentials for the Microsoft identity platform."""

    client_id: str
    client_secret: str
    refresh_token: str
    redirect_uri: str
    drive_id: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Credentials:
        """Build credentials from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Credentials instance.

        Raises:
            CredentialsNotFoundError: If any required variable is missing or empty.
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_VARS if not env.get(name)]
        if missing:
            raise CredentialsNotFoundError(missing)

        return cls(
            client_id=env[ENV_CLIENT_ID],
            client_secret=env[ENV_CLIENT_SECRET],
            refresh_token=env[ENV_REFRESH_TOKEN],
            redirect_uri=env[ENV_REDIRECT_URI],
            drive_id=env.get(ENV_DRIVE_ID) or None,
        )

    def __repr__(self) -> str:
        return (
            f"Credentials(client_id={self.client_id!r}, client_secret='***', "
            f"refresh_token='***', redirect_uri={self.redirect_uri!r}, "
            f"drive_id={self.drive_id!r})"
        )


@lru_cache(maxsize=1)
def get_credentials() -> Credentials:
    """Process-wide credentials, read from the environment on first use."""
    return Credentials.from_env()


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            # Only set if not already in environment (env vars take precedence)
            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def get_credential_status() -> dict:
    """Get status of all configured credentials.

    Returns:
        Dictionary with credential status. Values are never included.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "onedrive": {
            "client_id": bool(os.environ.get(ENV_CLIENT_ID)),
            "client_secret": bool(os.environ.get(ENV_CLIENT_SECRET)),
            "refresh_token": bool(os.environ.get(ENV_REFRESH_TOKEN)),
            "redirect_uri": bool(os.environ.get(ENV_REDIRECT_URI)),
            "drive_id": bool(os.environ.get(ENV_DRIVE_ID)),
        },
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
