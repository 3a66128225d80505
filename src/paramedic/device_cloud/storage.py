"""Sauce storage client for uploading the built app binary."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

import aiofiles  # type: ignore[import-untyped]
import httpx

from paramedic.shared.exceptions import UploadError

logger = logging.getLogger(__name__)


class SauceStorageUploader:
    """Upload app binaries to Sauce temporary storage.

    Uploads are keyed by ``(user, filename)`` and always overwrite, so
    uploading the same build twice is harmless.
    """

    def __init__(self, user: str, access_key: str, *, base_url: str, timeout: int = 300) -> None:
        self._user = user
        self._access_key = access_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def upload(self, binary_path: Path, filename: str) -> None:
        """Upload ``binary_path`` under ``filename``.

        Raises:
            UploadError: If the file is missing or the storage API rejects it.
        """
        url = f"{self._base_url}/{quote(self._user)}/{quote(filename)}"
        logger.info("uploading %s to sauce storage as %s", binary_path, filename)

        try:
            async with aiofiles.open(binary_path, "rb") as f:
                content = await f.read()
        except OSError as exc:
            raise UploadError(f"cannot read app binary {binary_path}: {exc}") from exc

        try:
            async with httpx.AsyncClient(timeout=self._timeout, auth=(self._user, self._access_key)) as client:
                resp = await client.post(
                    url,
                    params={"overwrite": "true"},
                    content=content,
                    headers={"Content-Type": "application/octet-stream"},
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UploadError(
                f"sauce storage returned {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UploadError(f"sauce storage upload failed: {exc}") from exc

        logger.info("uploaded %s (%d bytes)", filename, len(content))
