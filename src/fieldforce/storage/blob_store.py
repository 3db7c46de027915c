from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Protocol

from ..core.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def upload(self, path: str, data: bytes) -> str:
        """Store bytes under `path` and return their public URL."""

        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Files on local disk under `root`, served from `base_url`."""

    def __init__(self, root: str | Path, base_url: str):
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise ValidationError("Invalid blob path")
        return self._root.joinpath(*rel.parts)

    def upload(self, path: str, data: bytes) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error("Blob upload to %s failed: %s", target, e)
            raise PersistenceError("Could not store the uploaded file") from e
        return f"{self._base_url}/{PurePosixPath(path).as_posix()}"
