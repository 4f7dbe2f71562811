"""Services for copilot attachments uploads."""
from .metadata import MetadataEncoder
from .staging import StagingDirectoryManager
from .transport import HTTPUploadTransport

__all__ = [
    "MetadataEncoder",
    "StagingDirectoryManager",
    "HTTPUploadTransport",
]
