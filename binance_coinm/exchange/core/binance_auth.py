"""
Binance Authentication Handler

Handles request signing for SIGNED (TRADE / USER_DATA) endpoints.
Following Clean Code principles with clear authentication logic.
"""

import time
import hmac
import hashlib
from typing import Dict
import logging

logger = logging.getLogger(__name__)


class BinanceAuth:
    """
    Binance authentication handler.

    Signs serialised parameter strings with HMAC-SHA256 and keeps the
    local clock offset against the exchange server time.
    """

    def __init__(self, api_key: str, api_secret: str):
        """
        Initialize Binance authentication.

        Args:
            api_key: Binance API key
            api_secret: Binance API secret
        """
        self.api_key = api_key
        self.api_secret = api_secret
        # Server time offset in milliseconds (server_ms - local_ms)
        self._time_offset_ms: int = 0

    def set_time_offset(self, offset_ms: int) -> None:
        """
        Set server time offset in milliseconds.
        Positive value means server time is ahead of local time.
        """
        self._time_offset_ms = int(offset_ms)

    def get_time_offset(self) -> int:
        return self._time_offset_ms

    def now_ms(self) -> int:
        """
        Current timestamp in milliseconds adjusted by server time offset.
        """
        return int(time.time() * 1000) + self._time_offset_ms

    def generate_signature(self, payload: str) -> str:
        """
        Generate the request signature.

        Args:
            payload: Serialised query string or form body

        Returns:
            Hex encoded HMAC-SHA256 signature
        """
        return hmac.new(
            self.api_secret.encode('utf-8'),
            payload.encode('utf-8'),
            hashlib.sha256
        ).hexdigest()

    def sign_query(self, query: str, recv_window: int) -> str:
        """
        Append timestamp, recvWindow and signature to a serialised query.

        Args:
            query: Serialised parameters (may be empty)
            recv_window: Milliseconds the request stays valid after timestamp

        Returns:
            The signed query string
        """
        timing = f"timestamp={self.now_ms()}&recvWindow={recv_window}"
        payload = f"{query}&{timing}" if query else timing
        signature = self.generate_signature(payload)
        return f"{payload}&signature={signature}"

    def get_auth_headers(self) -> Dict[str, str]:
        """
        Get the API key header, if a key is configured.

        Returns:
            Dictionary of authentication headers
        """
        if not self.api_key:
            return {}
        return {'X-MBX-APIKEY': self.api_key}

    def validate_credentials(self) -> bool:
        """
        Check that both key and secret are present.

        Returns:
            True if credentials are usable for signing, False otherwise
        """
        if not self.api_key or not self.api_secret:
            logger.error("Binance credentials are incomplete")
            return False

        return True
