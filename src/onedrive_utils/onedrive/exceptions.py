"""OneDrive exceptions."""

from __future__ import annotations


class OneDriveError(Exception):
    """Base exception for OneDrive errors."""


class UploadError(OneDriveError):
    """Raised when a file upload fails at any stage.

    The message is always the same; the original failure is kept as
    ``__cause__``.
    """


class UploadSessionError(OneDriveError):
    """Raised when the upload session response carries no uploadUrl."""
