"""CLI for onedrive-utils.

Usage:
    onedrive-utils status                          # Show credential status
    onedrive-utils token                           # Test the refresh-token exchange
    onedrive-utils list                            # List files in the drive root
    onedrive-utils upload <file> [--path P] [--name N]   # Upload a file
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def cmd_status() -> int:
    """Show status of configured credentials."""
    from onedrive_utils.config import ENV_FILE, REPO_ROOT, get_credential_status

    status = get_credential_status()

    print("=" * 60)
    print("ONEDRIVE-UTILS CREDENTIAL STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {REPO_ROOT}")
    print(f".env file:  {'[x]' if status['env_file'] else '[ ]'} {ENV_FILE}")
    print()

    print("OneDrive:")
    print(f"  Client ID:     {'[x]' if status['onedrive']['client_id'] else '[ ]'}")
    print(f"  Client secret: {'[x]' if status['onedrive']['client_secret'] else '[ ]'}")
    print(f"  Refresh token: {'[x]' if status['onedrive']['refresh_token'] else '[ ]'}")
    print(f"  Redirect URI:  {'[x]' if status['onedrive']['redirect_uri'] else '[ ]'}")
    print(f"  Drive ID:      {'[x]' if status['onedrive']['drive_id'] else '[ ]'} (optional)")
    print()

    required = ("client_id", "client_secret", "refresh_token", "redirect_uri")
    return 0 if all(status["onedrive"][key] for key in required) else 1


def cmd_token() -> int:
    """Exchange the refresh token and report the result."""
    from onedrive_utils.microsoft import CredentialsNotFoundError
    from onedrive_utils.onedrive import OneDriveClient

    try:
        client = OneDriveClient()
        access_token = asyncio.run(client.get_access_token())
    except CredentialsNotFoundError as e:
        print(f"Error: {e}")
        print("Run 'onedrive-utils status' to check configuration")
        return 1
    except Exception as e:
        print(f"[✗] token exchange failed - {e}")
        return 1

    print(f"[✓] access token received ({len(access_token)} chars)")
    return 0


def cmd_list() -> int:
    """List files in the drive root."""
    from onedrive_utils.onedrive import OneDriveClient

    try:
        files = asyncio.run(OneDriveClient().list_files())
    except Exception as e:
        print(f"Error: {e}")
        return 1

    if not files:
        print("Drive root is empty")
        return 0

    for file in files:
        mark = "[d]" if file.download_url else "   "
        print(f"  {mark} {file.name}  ({file.id})")
    print()
    print(f"{len(files)} item(s); [d] = download URL available")
    return 0


def cmd_upload(file_path: str, path: str | None = None, name: str | None = None) -> int:
    """Upload a local file with a progress display."""
    from onedrive_utils.microsoft import CredentialsNotFoundError
    from onedrive_utils.onedrive import OneDriveClient, UploadError

    source = Path(file_path).expanduser()
    if not source.is_file():
        print(f"Error: File not found: {source}")
        return 1

    def show_progress(percentage: int) -> None:
        print(f"\rUploading {source.name}: {percentage:3d}%", end="", flush=True)

    try:
        client = OneDriveClient()
        result = asyncio.run(client.upload_file(source, path, name, show_progress))
    except CredentialsNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except UploadError as e:
        print()
        print(f"Error: {e} (see log for details)")
        return 1

    print()
    print(result.message)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="onedrive-utils",
        description="OneDrive uploads and listing with refresh-token authentication",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("status", help="Show credential status")
    subparsers.add_parser("token", help="Test the refresh-token exchange")
    subparsers.add_parser("list", help="List files in the drive root")

    upload_parser = subparsers.add_parser("upload", help="Upload a file")
    upload_parser.add_argument("file", help="Local file to upload")
    upload_parser.add_argument("--path", help="Destination folder (default: drive root)")
    upload_parser.add_argument("--name", help="Destination file name (used with --path)")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "status":
        return cmd_status()

    if args.command == "token":
        return cmd_token()

    if args.command == "list":
        return cmd_list()

    if args.command == "upload":
        return cmd_upload(args.file, args.path, args.name)

    return 0


if __name__ == "__main__":
    sys.exit(main())
