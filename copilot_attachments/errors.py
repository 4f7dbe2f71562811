"""Error taxonomy for attachment uploads."""
from enum import Enum


class UploadErrorKind(Enum):
    """Kinds of upload failures.

    Only SUBMISSION_FAILED, UPLOAD_FAILED and TIMED_OUT are raised to callers;
    the other two are logged and absorbed.
    """
    DIRECTORY_CREATION_FAILED = "directoryCreationFailed"
    METADATA_ENCODING_FAILED = "metadataEncodingFailed"
    SUBMISSION_FAILED = "submissionFailed"
    UPLOAD_FAILED = "uploadFailed"
    TIMED_OUT = "timedOut"


class UploadError(Exception):
    """Structured failure of an ``upload`` call."""

    def __init__(self, kind: UploadErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"

    def __repr__(self) -> str:
        return f"UploadError(kind={self.kind.value!r}, message={self.message!r})"


class ConfigError(ValueError):
    """Raised when uploader configuration cannot be loaded."""
