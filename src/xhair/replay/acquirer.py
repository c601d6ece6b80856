"""
Replay acquisition: download a gzip'd demo and decompress it to a temp file.

The payload is streamed through gzip straight to disk in fixed-size chunks,
so a demo is never held in memory whole. The returned ReplayArtifact is not
deleted here; the caller owns it and must release it.
"""

from __future__ import annotations

import gzip
import logging
import zlib
from pathlib import Path
from typing import BinaryIO

import requests
import urllib3

from xhair.core.config import ReplayConfig
from xhair.core.errors import ArtifactIOError, DecompressError, DownloadError
from xhair.core.models import CancelToken, ReplayArtifact
from xhair.core.utils import unique_artifact_name

logger = logging.getLogger(__name__)


class ReplayAcquirer:
    """Downloads and decompresses match demos into uniquely named temp files."""

    def __init__(self, config: ReplayConfig, session: requests.Session | None = None):
        self.config = config
        self._session = session or requests.Session()

    def acquire(
        self, match_id: str, url: str, cancel: CancelToken | None = None
    ) -> ReplayArtifact:
        """
        Stream the demo at `url` into a new temp file.

        On failure the partial file is removed before the error propagates.

        Raises:
            DownloadError: transport failure, non-2xx status or size cap exceeded
            DecompressError: payload is not valid gzip
            ArtifactIOError: temp file could not be created or written
            PipelineCancelled: cancel token fired between chunks
        """
        temp_dir = self.config.resolve_temp_dir()
        try:
            temp_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactIOError(f"Cannot create temp directory {temp_dir}: {e}") from e

        path = temp_dir / unique_artifact_name(match_id)
        logger.info(f"Downloading demo for match {match_id}")

        try:
            size = self._download_to(path, url, cancel)
        except Exception:
            path.unlink(missing_ok=True)
            raise

        logger.info(f"Demo for match {match_id} written to {path} ({size / (1024 * 1024):.1f}MB)")
        return ReplayArtifact(match_id=match_id, path=path, size_bytes=size)

    def _download_to(self, path: Path, url: str, cancel: CancelToken | None) -> int:
        timeout = (self.config.connect_timeout_seconds, self.config.read_timeout_seconds)
        try:
            response = self._session.get(url, stream=True, timeout=timeout)
        except requests.RequestException as e:
            raise DownloadError(f"Demo download failed: {e}") from e

        with response:
            if not response.ok:
                raise DownloadError(f"Demo download failed with status {response.status_code}")

            # Keep the gzip framing; we decompress it ourselves
            response.raw.decode_content = False

            try:
                out = open(path, "xb")
            except OSError as e:
                raise ArtifactIOError(f"Cannot create demo file {path}: {e}") from e

            with out, gzip.GzipFile(fileobj=response.raw, mode="rb") as compressed:
                return self._copy(compressed, out, cancel)

    def _copy(self, source: gzip.GzipFile, out: BinaryIO, cancel: CancelToken | None) -> int:
        written = 0
        while True:
            if cancel is not None:
                cancel.raise_if_cancelled("demo download")

            try:
                chunk = source.read(self.config.chunk_size)
            except (gzip.BadGzipFile, EOFError, zlib.error) as e:
                raise DecompressError(f"Demo is not a valid gzip stream: {e}") from e
            except (requests.RequestException, urllib3.exceptions.HTTPError, OSError) as e:
                raise DownloadError(f"Demo download interrupted: {e}") from e

            if not chunk:
                return written

            written += len(chunk)
            if written > self.config.max_demo_bytes:
                raise DownloadError(
                    f"Demo exceeds {self.config.max_demo_bytes // (1024 * 1024)}MB limit"
                )

            try:
                out.write(chunk)
            except OSError as e:
                raise ArtifactIOError(f"Failed writing demo to disk: {e}") from e

    def close(self) -> None:
        self._session.close()
