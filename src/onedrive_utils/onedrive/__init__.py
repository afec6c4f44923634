"""OneDrive client with refresh-token authentication.

Upload files through resumable upload sessions and list the drive root
via Microsoft Graph.

Usage:
    from onedrive_utils.onedrive import OneDriveClient

    client = OneDriveClient()

    # List files in the drive root
    files = await client.list_files()

    # Upload a file in 20 MiB chunks, reporting percentage progress
    result = await client.upload_file(
        "/path/to/video.mp4",
        path="Videos",
        on_progress=lambda pct: print(f"{pct}%"),
    )

Process-wide helpers read credentials from the environment:
    from onedrive_utils.onedrive import get_videos_from_onedrive, upload_to_onedrive

    await upload_to_onedrive("/path/to/video.mp4", path="Videos")
    files = await get_videos_from_onedrive()

Setup:
    Set ONEDRIVE_CLIENT_ID, ONEDRIVE_CLIENT_SECRET, ONEDRIVE_REFRESH_TOKEN and
    ONEDRIVE_REDIRECT_URI in the environment or the onedrive-utils .env file.
    Check with: onedrive-utils status
"""

from __future__ import annotations

from onedrive_utils.onedrive.chunks import CHUNK_SIZE, chunk_ranges
from onedrive_utils.onedrive.client import (
    OneDriveClient,
    OneDriveFile,
    UploadResult,
    get_access_token,
    get_videos_from_onedrive,
    upload_to_onedrive,
)
from onedrive_utils.onedrive.exceptions import OneDriveError, UploadError, UploadSessionError

__all__ = [
    "CHUNK_SIZE",
    "OneDriveClient",
    "OneDriveError",
    "OneDriveFile",
    "UploadError",
    "UploadResult",
    "UploadSessionError",
    "chunk_ranges",
    "get_access_token",
    "get_videos_from_onedrive",
    "upload_to_onedrive",
]
