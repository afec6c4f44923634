"""OneDrive (Microsoft Graph) client implementation."""

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import quote

import httpx

from onedrive_utils.config import Credentials, get_credentials
from onedrive_utils.microsoft import MicrosoftOAuth
from onedrive_utils.onedrive.chunks import CHUNK_SIZE, chunk_ranges, content_range, percent
from onedrive_utils.onedrive.exceptions import UploadError, UploadSessionError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], Awaitable[None] | None]
FileSource = str | Path | BinaryIO

# Granularity of progress reports within a chunk
STREAM_BLOCK_SIZE = 256 * 1024

DOWNLOAD_URL_KEY = "@microsoft.graph.downloadUrl"


@dataclass
class OneDriveFile:
    """Represents an item in the drive root."""

    id: str
    name: str
    download_url: str | None = None


@dataclass
class UploadResult:
    """Outcome of a completed upload."""

    success: bool
    message: str


class OneDriveClient:
    """OneDrive client using refresh-token authentication.

    Every call fetches its own access token and opens its own HTTP
    connection pool, so independent calls can run concurrently.

    Usage:
        client = OneDriveClient()

        # List files in the drive root
        files = await client.list_files()

        # Upload a file in 20 MiB chunks
        await client.upload_file("video.mp4", path="Videos", on_progress=print)
    """

    GRAPH_URL = "https://graph.microsoft.com/v1.0"

    def __init__(
        self,
        credentials: Credentials | None = None,
        chunk_size: int = CHUNK_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | httpx.Timeout | None = None,
    ) -> None:
        """Initialize OneDrive client.

        Args:
            credentials: OAuth credentials. Defaults to the process-wide
                credentials read from the environment.
            chunk_size: Upload chunk size in bytes.
            transport: Optional httpx transport (used by tests).
            timeout: Request timeout. None disables the timeout.
        """
        self.credentials = credentials or get_credentials()
        self.chunk_size = chunk_size
        self._transport = transport
        self._timeout = timeout
        self._auth = MicrosoftOAuth(self.credentials, transport=transport, timeout=timeout)

    @property
    def drive_url(self) -> str:
        """Base URL of the signed-in user's drive."""
        return f"{self.GRAPH_URL}/me/drive"

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    @staticmethod
    def _auth_headers(access_token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}

    async def get_access_token(self) -> str:
        """Exchange the refresh token for a fresh access token."""
        return await self._auth.get_access_token()

    # =========================================================================
    # Upload
    # =========================================================================

    def upload_session_url(
        self,
        source_name: str,
        path: str | None = None,
        filename: str | None = None,
    ) -> str:
        """Build the createUploadSession URL for a destination.

        With a path the file goes to ``{path}/{filename or source_name}``;
        without one it goes to the drive root under its source name.
        """
        if path:
            item_path = f"{path.strip('/')}/{filename or source_name}"
        else:
            item_path = source_name
        return f"{self.drive_url}/root:/{quote(item_path, safe='/')}:/createUploadSession"

    async def upload_file(
        self,
        file: FileSource,
        path: str | None = None,
        filename: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """Upload a file through a resumable upload session.

        Args:
            file: Local file path or a seekable binary file object.
            path: Destination folder relative to the drive root.
            filename: Destination name. Used with path, or when the source
                has no name of its own.
            on_progress: Called with the overall percentage (0-100) as bytes
                are sent. May be a coroutine function.

        Returns:
            UploadResult on success.

        Raises:
            UploadError: If any step fails. The original error is chained.
        """
        try:
            with _open_source(file) as (fh, source_name, size):
                name = source_name or filename
                if not name:
                    raise ValueError("Cannot determine a file name; pass filename")
                session_url = self.upload_session_url(name, path, filename)
                await self._upload(fh, size, session_url, on_progress)
        except Exception as e:
            logger.error(f"Upload Error: {_error_detail(e)}")
            raise UploadError("Failed to upload file") from e

        logger.info(f"File uploaded successfully: {name}")
        return UploadResult(success=True, message="File uploaded successfully")

    async def _upload(
        self,
        fh: BinaryIO,
        size: int,
        session_url: str,
        on_progress: ProgressCallback | None,
    ) -> None:
        access_token = await self.get_access_token()
        headers = self._auth_headers(access_token)

        async with self._http() as http:
            response = await http.post(session_url, json={}, headers=headers)
            response.raise_for_status()
            session = response.json()

            upload_url = session.get("uploadUrl")
            if not upload_url:
                logger.error(f"Failed to create an upload session: {session}")
                raise UploadSessionError("Upload session creation failed")

            logger.debug(f"Upload session created for {size} bytes")

            # Ranges must arrive in order and must not overlap
            for start, end in chunk_ranges(size, self.chunk_size):
                fh.seek(start)
                data = fh.read(end - start + 1)
                response = await http.put(
                    upload_url,
                    content=_progress_stream(data, start, size, on_progress),
                    headers={
                        **headers,
                        "Content-Length": str(len(data)),
                        "Content-Range": content_range(start, end, size),
                    },
                )
                response.raise_for_status()
                logger.debug(f"Chunk accepted: {content_range(start, end, size)}")

    # =========================================================================
    # Listing
    # =========================================================================

    async def list_files(self) -> list[OneDriveFile]:
        """List the immediate children of the drive root.

        Returns:
            OneDriveFile objects in the order returned by Graph.
        """
        access_token = await self.get_access_token()

        async with self._http() as http:
            response = await http.get(
                f"{self.drive_url}/root/children",
                headers=self._auth_headers(access_token),
            )
            response.raise_for_status()

        return [self._parse_file(item) for item in response.json()["value"]]

    def _parse_file(self, data: dict[str, Any]) -> OneDriveFile:
        """Parse a driveItem from an API response."""
        return OneDriveFile(
            id=data.get("id"),
            name=data.get("name"),
            download_url=data.get(DOWNLOAD_URL_KEY),
        )


@contextlib.contextmanager
def _open_source(file: FileSource) -> Iterator[tuple[BinaryIO, str | None, int]]:
    """Yield ``(handle, name, size)`` for a path or an open binary file."""
    if isinstance(file, (str, Path)):
        file_path = Path(file)
        with open(file_path, "rb") as fh:
            yield fh, file_path.name, file_path.stat().st_size
        return

    name = getattr(file, "name", None)
    name = Path(name).name if isinstance(name, str) else None
    file.seek(0, 2)
    size = file.tell()
    yield file, name, size


async def _progress_stream(
    data: bytes,
    start: int,
    total_size: int,
    on_progress: ProgressCallback | None,
) -> AsyncIterator[bytes]:
    """Stream a chunk body, reporting overall progress after each block is sent."""
    sent = 0
    for offset in range(0, len(data), STREAM_BLOCK_SIZE):
        block = data[offset : offset + STREAM_BLOCK_SIZE]
        yield block
        sent += len(block)
        if on_progress is not None:
            result = on_progress(percent(start + sent, total_size))
            if inspect.isawaitable(result):
                await result


def _error_detail(error: Exception) -> Any:
    """Best-effort provider error body for logging."""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            return error.response.json()
        except ValueError:
            return error.response.text
    return str(error)


# =============================================================================
# Process-wide helpers
# =============================================================================


async def get_access_token() -> str:
    """Fetch an access token using the environment credentials."""
    return await OneDriveClient().get_access_token()


async def upload_to_onedrive(
    file: FileSource,
    path: str | None = None,
    filename: str | None = None,
    on_progress: ProgressCallback | None = None,
) -> UploadResult:
    """Upload a file using the environment credentials."""
    return await OneDriveClient().upload_file(file, path, filename, on_progress)


async def get_videos_from_onedrive() -> list[OneDriveFile]:
    """List the drive root using the environment credentials."""
    return await OneDriveClient().list_files()
