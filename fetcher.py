"""Manifest download into isolated workspaces."""

import asyncio
import os
import shutil
import tempfile
import uuid
from pathlib import Path

import httpx

from config import Config
from errors import NoResult
from logging_setup import get_logger


def build_client(config: Config) -> httpx.AsyncClient:
    """Create the HTTP client shared by every validation in a run."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.request_timeout),
        limits=httpx.Limits(max_connections=config.max_connections_per_host),
        follow_redirects=True,
        headers={"User-Agent": "package-list-validator"},
    )


def create_workspace(data: bytes, file_name: str, workspace_root: Path) -> Path:
    """Write data as file_name inside a new uniquely named directory.

    The file is written to a temporary name and renamed into place, so the
    returned workspace always holds the complete manifest. On failure the
    directory is removed and OSError propagates.
    """
    workspace = workspace_root / uuid.uuid4().hex
    workspace.mkdir()

    try:
        fd, tmp_path = tempfile.mkstemp(dir=workspace, prefix=".manifest_")
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, workspace / file_name)
    except OSError:
        shutil.rmtree(workspace, ignore_errors=True)
        raise

    return workspace


class ManifestFetcher:
    def __init__(
        self,
        client: httpx.AsyncClient,
        manifest_file_name: str = "Package.swift",
        workspace_root: Path | None = None,
    ):
        self.client = client
        self.manifest_file_name = manifest_file_name
        self.workspace_root = workspace_root or Path(tempfile.gettempdir())

    async def fetch(self, manifest_url: str) -> Path:
        """Download manifest_url and return the workspace holding it.

        Raises:
            NoResult: on transport errors, non-2xx responses or workspace I/O errors
        """
        logger = get_logger()
        logger.debug("Downloading %s", manifest_url)

        try:
            response = await self.client.get(manifest_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NoResult(f"HTTP {e.response.status_code} fetching {manifest_url}") from e
        except httpx.HTTPError as e:
            raise NoResult(f"Error fetching {manifest_url}: {e}") from e

        try:
            workspace = await asyncio.to_thread(
                create_workspace, response.content, self.manifest_file_name, self.workspace_root
            )
        except OSError as e:
            raise NoResult(f"Unable to create workspace: {e}") from e

        logger.debug("Saved %s to %s", manifest_url, workspace)
        return workspace
