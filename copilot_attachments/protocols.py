"""
Protocols (Interfaces) for Dependency Inversion.

The upload transport is an external capability; the orchestrator only
depends on this submit-and-observe contract.
"""
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .models import UploadRequest, UploadStatus

StatusCallback = Callable[[UploadStatus], None]


@runtime_checkable
class ICancellable(Protocol):
    """Handle returned by a transport for an in-flight upload."""

    def cancel(self) -> Any:
        ...


@runtime_checkable
class IUploadTransport(Protocol):
    """Interface for upload transports."""

    def submit(self, request: UploadRequest, on_status: StatusCallback) -> Optional[ICancellable]:
        """
        Submit an upload request.

        ``on_status`` may be called from any thread: zero or more non-terminal
        statuses followed by exactly one terminal status. Raising from this
        method means the request was rejected before any status was emitted.
        """
        ...
