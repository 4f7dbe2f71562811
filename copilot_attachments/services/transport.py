"""HTTP adapter implementing the upload transport contract."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

import httpx

from ..models import UploadRequest, UploadStatus
from ..protocols import StatusCallback

logger = logging.getLogger(__name__)


class HTTPUploadTransport:
    """
    Multipart upload transport over httpx.

    Implements IUploadTransport protocol. Each submitted request runs in its
    own task and reports PENDING, IN_PROGRESS, then FINISHED or FAILED.
    """

    def __init__(self, timeout: float = 60, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._tasks: Set[asyncio.Task] = set()

    async def __aenter__(self):
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self

    async def __aexit__(self, *args):
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def submit(self, request: UploadRequest, on_status: StatusCallback) -> asyncio.Task:
        if not self._client:
            raise RuntimeError("HTTPUploadTransport not initialized. Use 'async with' context.")
        if not request.file_path.is_file():
            raise FileNotFoundError(f"archive not found: {request.file_path}")

        on_status(UploadStatus.pending())
        task = asyncio.create_task(self._run(self._client, request, on_status))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, client: httpx.AsyncClient, request: UploadRequest, on_status: StatusCallback) -> None:
        try:
            status = await self._send(client, request, on_status)
        except asyncio.CancelledError:
            logger.debug("Upload of %s cancelled", request.file_path.name)
            raise
        except Exception as exc:
            # Anything unexpected still has to end in a terminal status.
            logger.exception("Unexpected error uploading %s", request.file_path.name)
            status = UploadStatus.failed(f"{type(exc).__name__}: {exc}")
        on_status(status)

    async def _send(self, client: httpx.AsyncClient, request: UploadRequest, on_status: StatusCallback) -> UploadStatus:
        total = request.file_path.stat().st_size
        on_status(UploadStatus.in_progress(0, total))

        headers = {"User-Agent": request.sdk_information.user_agent}
        headers.update(request.headers)
        data = {"attachments": request.metadata}

        try:
            # file objects are streamed in chunks
            with request.file_path.open("rb") as archive:
                files = {"file": (request.file_path.name, archive, request.media_type)}
                response = await client.post(request.url, headers=headers, data=data, files=files)
        except (httpx.RequestError, httpx.TimeoutException) as exc:
            message = str(exc).strip() or type(exc).__name__
            return UploadStatus.failed(message)

        if response.status_code >= 400:
            detail = response.text.strip()
            return UploadStatus.failed(f"HTTP {response.status_code}: {detail}" if detail else f"HTTP {response.status_code}")

        on_status(UploadStatus.in_progress(total, total))
        return UploadStatus.finished()
