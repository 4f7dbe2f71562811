"""MetadataEncoder - archive descriptor to attachments metadata payload."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from ..errors import UploadErrorKind
from ..models import AttachmentArchive

logger = logging.getLogger(__name__)


def format_created(value: datetime) -> str:
    """
    Render a timestamp as ISO-8601 UTC with microseconds.

    Naive datetimes are taken as UTC. Example: 2024-05-01T12:30:45.123456Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None).isoformat(timespec="microseconds") + "Z"


class MetadataEncoder:
    """Builds the one-record JSON list sent alongside an archive."""

    @staticmethod
    def to_record(archive: AttachmentArchive) -> Dict[str, Any]:
        return {
            "name": archive.file_name,
            "fileId": archive.file_id,
            "sessionId": archive.session_id,
            "format": archive.file_type.format,
            "created": format_created(archive.created_at),
            "type": archive.file_type.type,
        }

    def encode(self, archive: AttachmentArchive) -> bytes:
        """Encode metadata; returns b"" if the archive cannot be encoded."""
        try:
            record = self.to_record(archive)
            return json.dumps([record], ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError, AttributeError, OverflowError) as e:
            logger.warning(
                "%s: sending %s without metadata: %s",
                UploadErrorKind.METADATA_ENCODING_FAILED.value,
                getattr(archive, "file_name", "archive"),
                e,
            )
            return b""
