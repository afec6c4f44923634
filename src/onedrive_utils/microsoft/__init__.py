"""Microsoft identity platform authentication utilities."""

from onedrive_utils.microsoft.exceptions import (
    CredentialsNotFoundError,
    MicrosoftAuthError,
)
from onedrive_utils.microsoft.oauth import MicrosoftOAuth

__all__ = [
    "MicrosoftOAuth",
    "MicrosoftAuthError",
    "CredentialsNotFoundError",
]
