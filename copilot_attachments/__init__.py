"""
Copilot attachments - delivers packaged navigation history archives.

Usage:
    from copilot_attachments import AttachmentsUploader, AttachmentArchive, FileType

    archive = AttachmentArchive(
        file_location=Path("session.zip"),
        file_name="session.zip",
        file_id="abc",
        session_id="s1",
        file_type=FileType.gzip(),
        created_at=datetime.now(timezone.utc),
    )
    async with AttachmentsUploader(UploaderConfig.from_env()) as uploader:
        await uploader.upload(access_token, archive)
"""
from .config import Environment, UploaderConfig
from .errors import ConfigError, UploadError, UploadErrorKind
from .models import (
    AttachmentArchive,
    FileType,
    SdkInformation,
    UploadRequest,
    UploadState,
    UploadStatus,
)
from .orchestrator import AttachmentsUploader, CompletionBridge
from .protocols import IUploadTransport
from .services import HTTPUploadTransport, MetadataEncoder, StagingDirectoryManager

__version__ = "0.1.0"
__all__ = [
    # Main
    "AttachmentsUploader",
    "CompletionBridge",
    # Models
    "AttachmentArchive",
    "FileType",
    "SdkInformation",
    "UploadRequest",
    "UploadState",
    "UploadStatus",
    # Errors
    "UploadError",
    "UploadErrorKind",
    "ConfigError",
    # Config
    "UploaderConfig",
    "Environment",
    # Services
    "HTTPUploadTransport",
    "IUploadTransport",
    "MetadataEncoder",
    "StagingDirectoryManager",
]
