"""File API: upload, inspect, list and delete media files."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

from genai_tokens.api._exceptions import FileProcessingError, FileProcessingTimeout
from genai_tokens.api._http import (
    BASE_URL,
    UPLOAD_URL,
    RetryConfig,
    api_headers,
    delete,
    get_json,
    send,
)
from genai_tokens.api._types import File, FileState, guess_mime_type
from genai_tokens.api._wire import parse_file

logger = logging.getLogger(__name__)


def _file_name(name: str) -> str:
    return name if name.startswith("files/") else f"files/{name}"


class FileManager:
    """Client for the ``files`` resource."""

    def __init__(
        self,
        api_key: str,
        *,
        retry: RetryConfig | None = None,
        base_url: str = BASE_URL,
        upload_url: str = UPLOAD_URL,
    ) -> None:
        self._api_key = api_key
        self._retry = retry
        self._base_url = base_url.rstrip("/")
        self._upload_url = upload_url
        self._headers = api_headers(api_key)

    def upload_file(
        self,
        path: str | Path,
        *,
        mime_type: str | None = None,
        display_name: str | None = None,
        timeout: int = 300,
    ) -> File:
        """Upload a local file with the resumable protocol and return its metadata."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(path)
        mime_type = mime_type or guess_mime_type(path)
        data = path.read_bytes()

        metadata: dict[str, Any] = {"file": {"displayName": display_name or path.name}}
        start = send(
            "POST",
            self._upload_url,
            {
                **self._headers,
                "X-Goog-Upload-Protocol": "resumable",
                "X-Goog-Upload-Command": "start",
                "X-Goog-Upload-Header-Content-Length": str(len(data)),
                "X-Goog-Upload-Header-Content-Type": mime_type,
            },
            payload=metadata,
            retry=self._retry,
        )
        session_url = start.headers.get("x-goog-upload-url")
        if not session_url:
            raise ValueError("Upload start response did not include x-goog-upload-url")
        logger.debug("Uploading %s (%d bytes, %s)", path, len(data), mime_type)

        # Finalizing is not idempotent, so it is never retried.
        r = send(
            "POST",
            session_url,
            {
                "x-goog-api-key": self._api_key,
                "Content-Length": str(len(data)),
                "X-Goog-Upload-Offset": "0",
                "X-Goog-Upload-Command": "upload, finalize",
            },
            data=data,
            timeout=timeout,
        )
        file = parse_file(r.json())
        logger.info("Uploaded %s as %s", path.name, file.name)
        return file

    def get_file(self, name: str) -> File:
        raw = get_json(f"{self._base_url}/{_file_name(name)}", self._headers, retry=self._retry)
        return parse_file(raw)

    def list_files(self, page_size: int | None = None) -> Iterator[File]:
        """Yield every stored file, following ``nextPageToken``."""
        params: dict[str, Any] = {}
        if page_size is not None:
            params["pageSize"] = page_size
        while True:
            raw = get_json(
                f"{self._base_url}/files", self._headers, params=params, retry=self._retry
            )
            for item in raw.get("files", []):
                yield parse_file(item)
            token = raw.get("nextPageToken")
            if not token:
                return
            params["pageToken"] = token

    def delete_file(self, name: str) -> None:
        delete(f"{self._base_url}/{_file_name(name)}", self._headers, retry=self._retry)
        logger.info("Deleted %s", _file_name(name))

    def wait_for_active(
        self,
        name: str,
        *,
        poll_interval: float = 10.0,
        timeout: float | None = None,
        on_poll: Callable[[File], None] | None = None,
    ) -> File:
        """Poll ``name`` at a fixed interval until it leaves ``PROCESSING``.

        Raises:
            FileProcessingError: the file ended in ``FAILED``.
            FileProcessingTimeout: ``timeout`` seconds passed while still processing.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        file = self.get_file(name)
        while file.state == FileState.PROCESSING:
            if deadline is not None and time.monotonic() >= deadline:
                raise FileProcessingTimeout(file, timeout)  # type: ignore[arg-type]
            if on_poll is not None:
                on_poll(file)
            logger.debug("%s still processing, sleeping %.1fs", file.name, poll_interval)
            time.sleep(poll_interval)
            file = self.get_file(name)

        if file.state == FileState.FAILED:
            raise FileProcessingError(file)
        return file
