"""Uploader configuration: environment selection and endpoint constants."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import ConfigError
from .models import SdkInformation

logger = logging.getLogger(__name__)

STAGING_UPLOAD_URL = "https://api-events-staging.tilestream.net"
PRODUCTION_UPLOAD_URL = "https://events.mapbox.com"
MEDIA_TYPE_ZIP = "application/zip"
STAGING_DIR_NAME = "NavigationHistoryAttachments"


class Environment(Enum):
    """Deployment environment selecting the ingestion endpoint."""
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def base_upload_url(self) -> str:
        if self is Environment.STAGING:
            return STAGING_UPLOAD_URL
        return PRODUCTION_UPLOAD_URL


@dataclass(frozen=True)
class UploaderConfig:
    """Immutable configuration for attachment uploads."""
    environment: Environment = Environment.PRODUCTION
    base_upload_url: Optional[str] = None  # overrides the environment's URL
    media_type: str = MEDIA_TYPE_ZIP
    staging_dir_name: str = STAGING_DIR_NAME
    request_timeout: float = 60.0
    sdk_information: SdkInformation = field(default_factory=SdkInformation)

    @property
    def upload_base_url(self) -> str:
        url = self.base_upload_url or self.environment.base_upload_url
        return url.rstrip("/")

    @classmethod
    def from_env(cls) -> "UploaderConfig":
        """
        Build configuration from environment variables.

        Reads COPILOT_ENV (staging|production), COPILOT_UPLOAD_URL and
        COPILOT_UPLOAD_TIMEOUT.
        """
        env_name = (os.getenv("COPILOT_ENV") or Environment.PRODUCTION.value).strip().lower()
        try:
            environment = Environment(env_name)
        except ValueError as exc:
            raise ConfigError(f"unknown COPILOT_ENV value: {env_name!r}") from exc

        timeout_raw = os.getenv("COPILOT_UPLOAD_TIMEOUT")
        request_timeout = cls.request_timeout
        if timeout_raw:
            try:
                request_timeout = float(timeout_raw)
            except ValueError as exc:
                raise ConfigError(f"COPILOT_UPLOAD_TIMEOUT is not a number: {timeout_raw!r}") from exc
            if request_timeout <= 0:
                raise ConfigError("COPILOT_UPLOAD_TIMEOUT must be positive")

        config = cls(
            environment=environment,
            base_upload_url=os.getenv("COPILOT_UPLOAD_URL") or None,
            request_timeout=request_timeout,
        )
        logger.debug("Uploader config: %s -> %s", environment.value, config.upload_base_url)
        return config

