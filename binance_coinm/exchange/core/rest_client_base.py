"""
Base REST Client

Signed HTTP transport shared by the Binance REST clients. Handles base URL
selection, request signing, clock drift, rate limit bookkeeping, retries
for idempotent reads and translation of failures into binance exceptions.
"""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import aiohttp
from binance.exceptions import BinanceAPIException, BinanceRequestException
from yarl import URL

from .binance_auth import BinanceAuth
from .exchange_config import RestClientOptions
from .request_utils import get_rest_base_url, serialise_params

logger = logging.getLogger(__name__)

API_LIMIT_HEADERS = (
    'x-mbx-used-weight',
    'x-mbx-used-weight-1m',
    'x-mbx-order-count-10s',
    'x-mbx-order-count-1m',
)

RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)

# Wait before retrying a failed time sync
TIME_SYNC_RETRY_MS = 60_000


class BaseRestClient(ABC):
    """
    Abstract base class for Binance REST clients.

    Subclasses map their endpoints onto the verb helpers below and provide
    get_server_time(), which is used for clock drift handling.
    """

    def __init__(self, client_id: str, options: Optional[RestClientOptions] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize the REST client.

        Args:
            client_id: Account category, e.g. 'coinm' or 'coinmtest'
            options: Client options; defaults to a public-only configuration
            session: Optional aiohttp session. An injected session is never
                closed by the client.
        """
        self.client_id = client_id
        self.options = options or RestClientOptions()
        self.base_url = get_rest_base_url(client_id, self.options)
        self.auth = BinanceAuth(self.options.api_key, self.options.api_secret)

        self._session = session
        self._owns_session = session is None
        self._next_time_sync_ms = 0

        self._api_limit_trackers: Dict[str, Optional[int]] = {header: None for header in API_LIMIT_HEADERS}
        self._api_limit_last_updated: Optional[int] = None

        logger.info(f"{type(self).__name__} initialized for {self.client_id} at {self.base_url}")

    @abstractmethod
    async def get_server_time(self) -> int:
        """
        Fetch the exchange server time.

        Returns:
            int: Server time in milliseconds
        """
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *excinfo):
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            logger.info("REST client session closed.")
        if self._owns_session:
            self._session = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.options.request_timeout)
            )
        return self._session

    # Public verbs
    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('GET', path, params, is_private=False)

    async def post(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('POST', path, params, is_private=False)

    async def put(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('PUT', path, params, is_private=False)

    async def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('DELETE', path, params, is_private=False)

    # Signed verbs
    async def get_private(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('GET', path, params, is_private=True)

    async def post_private(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('POST', path, params, is_private=True)

    async def put_private(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('PUT', path, params, is_private=True)

    async def delete_private(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call('DELETE', path, params, is_private=True)

    # Time Sync
    def _now_ms(self) -> int:
        return int(time.time() * 1000)

    def get_time_offset(self) -> int:
        return self.auth.get_time_offset()

    async def sync_time(self) -> None:
        """
        Measure the offset between local and server clocks.

        The server timestamp is compared against the midpoint of the
        request so half the round trip is taken off. A failed sync keeps
        the previous offset and is retried after TIME_SYNC_RETRY_MS.
        """
        start = self._now_ms()
        try:
            server_time = await self.get_server_time()
        except (BinanceAPIException, BinanceRequestException) as e:
            logger.error(f"Failed to sync time with {self.client_id} server: {e}")
            self._next_time_sync_ms = self._now_ms() + min(TIME_SYNC_RETRY_MS, self.options.sync_interval_ms)
            return
        end = self._now_ms()

        offset = int(server_time - (start + end) / 2)
        self.auth.set_time_offset(offset)
        self._next_time_sync_ms = end + self.options.sync_interval_ms
        logger.debug(f"Time synced with {self.client_id}: offset {offset}ms, latency {end - start}ms")

    async def _sync_time_if_needed(self) -> None:
        if self.options.disable_time_sync:
            return

        if self._now_ms() < self._next_time_sync_ms:
            return

        await self.sync_time()

    # Rate Limits
    def get_rate_limit_states(self) -> Dict[str, Optional[int]]:
        """
        Latest API usage reported by the exchange in response headers.

        Returns:
            Header name to last reported value, plus 'last_updated' (ms)
        """
        states: Dict[str, Optional[int]] = dict(self._api_limit_trackers)
        states['last_updated'] = self._api_limit_last_updated
        return states

    def _update_api_limit_state(self, headers: Dict[str, str]) -> None:
        updated = False
        for header in API_LIMIT_HEADERS:
            value = headers.get(header)
            if value is None:
                continue
            try:
                self._api_limit_trackers[header] = int(value)
                updated = True
            except ValueError:
                logger.warning(f"Ignoring non-numeric rate limit header {header}={value}")

        if updated:
            self._api_limit_last_updated = self._now_ms()

    # Request Pipeline
    def _build_request(self, method: str, path: str, params: Optional[Dict[str, Any]],
                       is_private: bool) -> Tuple[URL, Dict[str, str], Optional[str]]:
        query = serialise_params(params, self.options.filter_undefined_params)
        if is_private:
            query = self.auth.sign_query(query, self.options.recv_window)

        headers = self.auth.get_auth_headers()
        url = f"{self.base_url}/{path}"

        if method in ('GET', 'DELETE'):
            if query:
                url = f"{url}?{query}"
            return URL(url, encoded=True), headers, None

        headers['Content-Type'] = 'application/x-www-form-urlencoded'
        return URL(url, encoded=True), headers, query

    async def _execute(self, method: str, url: URL, headers: Dict[str, str],
                       data: Optional[str]) -> Tuple[int, Dict[str, str], str]:
        """
        Send one HTTP request.

        Returns:
            Tuple of (status, lower-cased response headers, body text)
        """
        session = await self._get_session()
        async with session.request(method, url, headers=headers, data=data) as resp:
            text = await resp.text()
            response_headers = {key.lower(): value for key, value in resp.headers.items()}
            return resp.status, response_headers, text

    async def _call(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                    is_private: bool = False) -> Any:
        if is_private:
            if not self.auth.validate_credentials():
                raise BinanceRequestException(
                    f"Private endpoints require api_key and api_secret: {method} {path}"
                )
            await self._sync_time_if_needed()

        # Only reads are safe to repeat
        attempts = self.options.max_retries + 1 if method == 'GET' else 1

        for attempt in range(attempts):
            url, headers, data = self._build_request(method, path, params, is_private)
            started = time.monotonic()
            try:
                status, response_headers, text = await self._execute(method, url, headers, data)
                break
            except RETRYABLE_ERRORS as e:
                if attempt + 1 >= attempts:
                    logger.error(f"[{method}] {path} failed after {attempt + 1} attempt(s): {e!r}")
                    raise BinanceRequestException(f"{method} {path} failed: {e!r}") from e

                delay = self.options.retry_delay * (2 ** attempt)
                logger.warning(f"[{method}] {path} attempt {attempt + 1} failed: {e!r}. Retrying in {delay:.2f}s")
                await asyncio.sleep(delay)

        logger.info(f"[{method}] {path} - {status} - {time.monotonic() - started:.3f}s")
        self._update_api_limit_state(response_headers)
        return self._handle_response(method, path, status, text)

    @staticmethod
    def _handle_response(method: str, path: str, status: int, text: str) -> Any:
        """
        Decode a response body or raise the matching binance exception.
        """
        if status >= 400:
            try:
                error = json.loads(text)
            except ValueError:
                error = None
            # Anything but a Binance {"code", "msg"} object, e.g. a proxy page
            if not (isinstance(error, dict) and 'code' in error and 'msg' in error):
                text = json.dumps({'code': -1, 'msg': text or f"HTTP {status}"})
            logger.error(f"Binance API error on [{method}] {path}: {status} {text}")
            raise BinanceAPIException(None, status, text)

        try:
            return json.loads(text)
        except ValueError:
            raise BinanceRequestException(f"Invalid Response: {text}")
