"""
Models for copilot attachments uploads.

Immutable dataclasses describing archives, requests and transport statuses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True)
class FileType:
    """Compression format and container type of a packaged archive."""
    format: str
    type: str

    @classmethod
    def gzip(cls) -> "FileType":
        return cls(format="gz", type="zip")


@dataclass(frozen=True)
class AttachmentArchive:
    """Immutable description of a packaged session archive awaiting upload."""
    file_location: Path
    file_name: str
    file_id: str
    session_id: str
    file_type: FileType
    created_at: datetime


class UploadState(Enum):
    """Transport-observed upload state."""
    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    FINISHED = "finished"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadStatus:
    """One status event reported by a transport for a submitted request."""
    state: UploadState
    error_message: Optional[str] = None
    bytes_sent: Optional[int] = None
    total_bytes: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (UploadState.FINISHED, UploadState.FAILED)

    @property
    def percent(self) -> Optional[float]:
        if self.bytes_sent is None or not self.total_bytes:
            return None
        return self.bytes_sent * 100.0 / self.total_bytes

    @classmethod
    def pending(cls) -> "UploadStatus":
        return cls(UploadState.PENDING)

    @classmethod
    def in_progress(cls, bytes_sent: Optional[int] = None, total_bytes: Optional[int] = None) -> "UploadStatus":
        return cls(UploadState.IN_PROGRESS, bytes_sent=bytes_sent, total_bytes=total_bytes)

    @classmethod
    def finished(cls) -> "UploadStatus":
        return cls(UploadState.FINISHED)

    @classmethod
    def failed(cls, message: Optional[str] = None) -> "UploadStatus":
        return cls(UploadState.FAILED, error_message=message)


@dataclass(frozen=True)
class SdkInformation:
    """Client identification sent along with every upload."""
    name: str = "copilot-attachments"
    version: str = "0.1.0"
    package_name: Optional[str] = None

    @property
    def user_agent(self) -> str:
        agent = f"{self.name}/{self.version}"
        if self.package_name:
            agent += f" ({self.package_name})"
        return agent


@dataclass(frozen=True)
class UploadRequest:
    """Everything a transport needs to perform one upload."""
    file_path: Path
    url: str
    metadata: str
    media_type: str
    sdk_information: SdkInformation
    headers: Dict[str, str] = field(default_factory=dict)
