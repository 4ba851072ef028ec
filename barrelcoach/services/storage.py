"""Video storage adapter backed by a local directory tree.

Objects live under ``<storage_root>/<bucket>/<key>``. Writes upsert, so a
second write to the same key replaces the previous object.
"""

from __future__ import annotations

import asyncio
from pathlib import Path, PurePosixPath
from typing import Optional

import structlog

from ..core.errors import InvalidArgumentError, NotFoundError, StorageError

logger = structlog.get_logger(__name__)

_MIME_EXTENSIONS = {
    "video/mp4": "mp4",
    "video/quicktime": "mov",
}


def video_extension(filename: Optional[str], content_type: Optional[str]) -> str:
    """Choose the storage extension for an uploaded video.

    The filename's extension wins when it is short enough to be real;
    otherwise the mime type decides, defaulting to ``mp4``.
    """
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if ext and len(ext) <= 5:
            return ext
    return _MIME_EXTENSIONS.get((content_type or "").lower(), "mp4")


def swing_storage_key(session_id: str, swing_index: int, ext: str) -> str:
    """Deterministic object key for a swing slot."""
    return f"{session_id}/{swing_index}.{ext}"


class VideoStorage:
    """Store and retrieve video blobs by bucket and key."""

    def __init__(self, root: str | Path, public_url: str):
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    def _path(self, bucket: str, key: str) -> Path:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts:
            raise InvalidArgumentError("Invalid storage key", details={"key": key})
        return self.root / bucket / Path(*relative.parts)

    def public_url_for(self, bucket: str, key: str) -> str:
        return f"{self.public_url}/{bucket}/{key}"

    async def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """Write ``data`` at ``bucket/key`` (upsert) and return its public URL."""
        path = self._path(bucket, key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            logger.error("storage_write_failed", bucket=bucket, key=key, error=str(exc))
            raise StorageError(f"Failed to store {key}: {exc}") from exc

        logger.info(
            "storage_write",
            bucket=bucket,
            key=key,
            size=len(data),
            content_type=content_type,
        )
        return self.public_url_for(bucket, key)

    async def get(self, bucket: str, key: str) -> bytes:
        """Read the object at ``bucket/key``."""
        path = self._path(bucket, key)
        if not path.exists():
            raise NotFoundError(f"Stored object {bucket}/{key} not found")
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    async def delete(self, bucket: str, key: str) -> bool:
        path = self._path(bucket, key)
        if not path.exists():
            return False
        await asyncio.to_thread(path.unlink)
        return True


__all__ = ["VideoStorage", "swing_storage_key", "video_extension"]
