"""Shared fixtures: archives and a scripted upload transport."""
import asyncio
import threading
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from copilot_attachments.models import AttachmentArchive, FileType, UploadRequest, UploadStatus


class ScriptedTransport:
    """Transport double that replays a fixed list of statuses."""

    def __init__(self, statuses: List[UploadStatus], mode: str = "task", error: Optional[Exception] = None):
        self.statuses = statuses
        self.mode = mode  # sync | task | thread | never
        self.error = error
        self.requests: List[UploadRequest] = []
        self.handles: List["FakeHandle"] = []

    def submit(self, request, on_status):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        statuses = list(self.statuses)
        handle = FakeHandle()
        self.handles.append(handle)

        if self.mode == "sync":
            for status in statuses:
                on_status(status)
        elif self.mode == "task":
            async def replay():
                for status in statuses:
                    await asyncio.sleep(0)
                    on_status(status)
            handle.task = asyncio.create_task(replay())
        elif self.mode == "thread":
            def replay():
                for status in statuses:
                    on_status(status)
            thread = threading.Thread(target=replay)
            thread.start()
            handle.thread = thread
        return handle


class FakeHandle:
    def __init__(self):
        self.cancelled = False
        self.task = None
        self.thread = None

    def cancel(self):
        self.cancelled = True
        if self.task is not None:
            self.task.cancel()


CREATED_AT = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture
def archive(tmp_path) -> AttachmentArchive:
    path = tmp_path / "trace.zip"
    path.write_bytes(b"PK\x03\x04 fake archive")
    return AttachmentArchive(
        file_location=path,
        file_name="trace.zip",
        file_id="abc",
        session_id="s1",
        file_type=FileType.gzip(),
        created_at=CREATED_AT,
    )
