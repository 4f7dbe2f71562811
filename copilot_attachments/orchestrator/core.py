"""Core orchestrator - uploads packaged session archives to attachments."""
import asyncio
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from ..config import UploaderConfig
from ..errors import UploadError, UploadErrorKind
from ..models import AttachmentArchive, UploadRequest, UploadState
from ..protocols import IUploadTransport
from ..services.metadata import MetadataEncoder
from ..services.staging import StagingDirectoryManager
from ..services.transport import HTTPUploadTransport
from .bridge import CompletionBridge, ProgressCallback

logger = logging.getLogger(__name__)

UNKNOWN_UPLOAD_ERROR = "Unknown upload error"


class AttachmentsUploader:
    """
    Uploads session archives using injected services.

    Usage:
        # Default HTTP transport
        async with AttachmentsUploader(UploaderConfig.from_env()) as uploader:
            await uploader.upload(access_token, archive)

        # Any IUploadTransport implementation
        uploader = AttachmentsUploader(config, transport=native_transport)
        await uploader.upload(access_token, archive)
    """

    def __init__(
        self,
        config: Optional[UploaderConfig] = None,
        transport: Optional[IUploadTransport] = None,
        staging: Optional[StagingDirectoryManager] = None,
        encoder: Optional[MetadataEncoder] = None,
    ):
        """
        Initialize uploader with dependencies.

        Args:
            config: Uploader configuration
            transport: Upload transport; an HTTPUploadTransport is created in
                __aenter__ when omitted
            staging: Staging directory manager
            encoder: Metadata encoder
        """
        self._config = config or UploaderConfig()
        self._transport = transport
        self._owned_transport: Optional[HTTPUploadTransport] = None
        self._staging = staging or StagingDirectoryManager(dir_name=self._config.staging_dir_name)
        self._encoder = encoder or MetadataEncoder()

    async def __aenter__(self):
        if self._transport is None:
            self._owned_transport = HTTPUploadTransport(timeout=self._config.request_timeout)
            await self._owned_transport.__aenter__()
            self._transport = self._owned_transport
        return self

    async def __aexit__(self, *args):
        if self._owned_transport:
            await self._owned_transport.__aexit__(*args)
            self._transport = None
            self._owned_transport = None

    @property
    def config(self) -> UploaderConfig:
        return self._config

    @property
    def staging_directory(self) -> Path:
        return self._staging.get_or_create()

    def upload_url(self, access_token: str) -> str:
        """
        Attachments endpoint for ``access_token``.

        The token is percent-encoded so it always parses back as the
        ``access_token`` query value; ordinary tokens are appended unchanged.
        """
        return f"{self._config.upload_base_url}/attachments/v1?access_token={quote(access_token, safe='')}"

    def build_request(self, access_token: str, archive: AttachmentArchive) -> UploadRequest:
        metadata = self._encoder.encode(archive).decode("utf-8")
        return UploadRequest(
            file_path=self._staging.resolve(archive.file_location),
            url=self.upload_url(access_token),
            headers={},
            metadata=metadata,
            media_type=self._config.media_type,
            sdk_information=self._config.sdk_information,
        )

    async def upload(
        self,
        access_token: str,
        archive: AttachmentArchive,
        timeout: Optional[float] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Upload one archive. One call performs at most one network attempt.

        Raises:
            UploadError: SUBMISSION_FAILED, UPLOAD_FAILED or TIMED_OUT
        """
        if self._transport is None:
            raise RuntimeError("AttachmentsUploader has no transport. Use 'async with' context.")

        request = self.build_request(access_token, archive)
        bridge = CompletionBridge(progress_callback=progress_callback)

        try:
            handle = self._transport.submit(request, bridge.handle)
        except Exception as e:
            bridge.abandon()
            message = str(e).strip() or type(e).__name__
            logger.error("Failed to submit %s for upload: %s", archive.file_name, message)
            raise UploadError(UploadErrorKind.SUBMISSION_FAILED, message) from e

        try:
            status = await asyncio.wait_for(bridge.wait(), timeout)
        except asyncio.TimeoutError:
            if not self._stop(bridge, handle):
                # terminal status arrived while the timeout fired
                status = await bridge.wait()
            else:
                logger.error("Upload of %s timed out after %ss", archive.file_name, timeout)
                raise UploadError(
                    UploadErrorKind.TIMED_OUT,
                    f"upload of {archive.file_name} did not finish within {timeout}s",
                ) from None
        except asyncio.CancelledError:
            self._stop(bridge, handle)
            raise

        if status.state is UploadState.FAILED:
            message = status.error_message or UNKNOWN_UPLOAD_ERROR
            logger.error("Failed to upload session to attachments. %s", message)
            raise UploadError(UploadErrorKind.UPLOAD_FAILED, message)

        logger.info("Uploaded %s (session %s)", archive.file_name, archive.session_id)

    @staticmethod
    def _stop(bridge: CompletionBridge, handle) -> bool:
        """Abandon the bridge and cancel the transport handle if it is still running."""
        if not bridge.abandon():
            return False
        cancel = getattr(handle, "cancel", None)
        if callable(cancel):
            cancel()
        return True
