"""Tests for the httpx upload transport."""
import asyncio

import httpx
import pytest

from copilot_attachments.models import SdkInformation, UploadRequest, UploadState
from copilot_attachments.services.transport import HTTPUploadTransport

URL = "https://events.example.com/attachments/v1?access_token=tok"


def _request(path, metadata='[{"name": "trace.zip"}]'):
    return UploadRequest(
        file_path=path,
        url=URL,
        headers={},
        metadata=metadata,
        media_type="application/zip",
        sdk_information=SdkInformation("nav-sdk", "3.0.0"),
    )


async def _submit_and_collect(transport, request):
    statuses = []
    done = asyncio.Event()

    def on_status(status):
        statuses.append(status)
        if status.is_terminal:
            done.set()

    transport.submit(request, on_status)
    await asyncio.wait_for(done.wait(), 1)
    return statuses


@pytest.fixture
def archive_file(tmp_path):
    path = tmp_path / "trace.zip"
    path.write_bytes(b"PK\x03\x04 payload")
    return path


@pytest.mark.asyncio
async def test_successful_upload_reports_finished(archive_file):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        captured["body"] = request.content
        return httpx.Response(200, json={"ok": True})

    async with HTTPUploadTransport(transport=httpx.MockTransport(handler)) as transport:
        statuses = await _submit_and_collect(transport, _request(archive_file))

    states = [s.state for s in statuses]
    assert states[0] == UploadState.PENDING
    assert UploadState.IN_PROGRESS in states
    assert states[-1] == UploadState.FINISHED
    assert sum(1 for s in statuses if s.is_terminal) == 1

    sent = captured["request"]
    assert sent.method == "POST"
    assert sent.url.params["access_token"] == "tok"
    assert sent.headers["User-Agent"] == "nav-sdk/3.0.0"
    assert sent.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="attachments"' in captured["body"]
    assert b'filename="trace.zip"' in captured["body"]
    assert b"application/zip" in captured["body"]
    assert b"PK\x03\x04 payload" in captured["body"]


@pytest.mark.asyncio
async def test_http_error_reports_failed_with_status(archive_file):
    def handler(request):
        return httpx.Response(507, text="disk full")

    async with HTTPUploadTransport(transport=httpx.MockTransport(handler)) as transport:
        statuses = await _submit_and_collect(transport, _request(archive_file))

    assert statuses[-1].state == UploadState.FAILED
    assert "507" in statuses[-1].error_message
    assert "disk full" in statuses[-1].error_message


@pytest.mark.asyncio
async def test_network_error_reports_failed(archive_file):
    def handler(request):
        raise httpx.ConnectTimeout("network timeout", request=request)

    async with HTTPUploadTransport(transport=httpx.MockTransport(handler)) as transport:
        statuses = await _submit_and_collect(transport, _request(archive_file))

    assert statuses[-1].state == UploadState.FAILED
    assert "network timeout" in statuses[-1].error_message


@pytest.mark.asyncio
async def test_no_retry_on_server_error(archive_file):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    async with HTTPUploadTransport(transport=httpx.MockTransport(handler)) as transport:
        statuses = await _submit_and_collect(transport, _request(archive_file))

    assert len(calls) == 1
    assert statuses[-1].error_message == "HTTP 503"


@pytest.mark.asyncio
async def test_submit_missing_file_raises(tmp_path):
    async with HTTPUploadTransport(transport=httpx.MockTransport(lambda r: httpx.Response(200))) as transport:
        with pytest.raises(FileNotFoundError):
            transport.submit(_request(tmp_path / "missing.zip"), lambda status: None)


def test_submit_requires_context(archive_file):
    transport = HTTPUploadTransport()
    with pytest.raises(RuntimeError, match="async with"):
        transport.submit(_request(archive_file), lambda status: None)


@pytest.mark.asyncio
async def test_exit_waits_for_in_flight_uploads(archive_file):
    statuses = []

    async def handler(request):
        await asyncio.sleep(0.01)
        return httpx.Response(201)

    async with HTTPUploadTransport(transport=httpx.MockTransport(handler)) as transport:
        transport.submit(_request(archive_file), statuses.append)
        assert transport.in_flight == 1

    assert statuses[-1].state == UploadState.FINISHED
    assert transport.in_flight == 0


@pytest.mark.asyncio
async def test_archive_is_streamed_not_read_whole(archive_file, monkeypatch):
    captured = {}

    def handler(request):
        captured["body"] = request.content
        return httpx.Response(200)

    def no_read_bytes(self):
        raise AssertionError("archive loaded into memory")

    monkeypatch.setattr(type(archive_file), "read_bytes", no_read_bytes)

    async with HTTPUploadTransport(transport=httpx.MockTransport(handler)) as transport:
        statuses = await _submit_and_collect(transport, _request(archive_file))

    assert statuses[-1].state == UploadState.FINISHED
    assert statuses[1].total_bytes == len(b"PK\x03\x04 payload")
    assert b"PK\x03\x04 payload" in captured["body"]
