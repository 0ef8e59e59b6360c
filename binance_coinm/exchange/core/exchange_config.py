"""
REST Client Configuration

Centralized options for the signed REST transport.
Following Clean Code principles with clear, focused configuration.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class RestClientOptions:
    """
    Options for a REST client instance.

    Credentials are optional: a client without them can still call
    public endpoints, but every signed call will be refused.
    """

    # API Configuration
    api_key: str = ""
    api_secret: str = ""

    # Signing
    recv_window: int = 5000

    # Time Sync
    sync_interval_ms: int = 3_600_000
    disable_time_sync: bool = False

    # Parameters
    filter_undefined_params: bool = True

    # Connection Settings
    base_url: Optional[str] = None
    request_timeout: int = 10
    max_retries: int = 3
    retry_delay: float = 1.0

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.recv_window <= 0:
            raise ValueError("recv_window must be positive")

        if self.recv_window > 60000:
            raise ValueError("recv_window cannot exceed 60000 ms")

        if self.sync_interval_ms <= 0:
            raise ValueError("sync_interval_ms must be positive")

        if self.request_timeout <= 0:
            raise ValueError("Request timeout must be positive")

        if self.max_retries < 0:
            raise ValueError("Max retries cannot be negative")

        if self.retry_delay < 0:
            raise ValueError("Retry delay cannot be negative")

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def _mask_api_key(self) -> Optional[str]:
        if not self.api_key:
            return None
        if len(self.api_key) <= 15:
            return '***'
        return f"{self.api_key[:10]}...{self.api_key[-5:]}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'api_key': self._mask_api_key(),
            'api_secret': '***' if self.api_secret else None,  # Hide secret
            'recv_window': self.recv_window,
            'sync_interval_ms': self.sync_interval_ms,
            'disable_time_sync': self.disable_time_sync,
            'filter_undefined_params': self.filter_undefined_params,
            'base_url': self.base_url,
            'request_timeout': self.request_timeout,
            'max_retries': self.max_retries,
            'retry_delay': self.retry_delay
        }

    def log_config(self) -> None:
        """Log configuration (without sensitive data)."""
        config_dict = self.to_dict()
        logger.info(f"REST client configuration: {config_dict}")
