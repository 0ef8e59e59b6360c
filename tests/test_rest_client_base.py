"""
Tests for the signed REST transport.

The raw HTTP round trip (_execute) is stubbed; everything above it runs for real.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch
from urllib.parse import parse_qs

import aiohttp
import pytest
from binance.exceptions import BinanceAPIException, BinanceRequestException

from binance_coinm.exchange.core.exchange_config import RestClientOptions
from binance_coinm.exchange.core.rest_client_base import TIME_SYNC_RETRY_MS, BaseRestClient


class StubRestClient(BaseRestClient):
    """Concrete transport with a controllable server clock."""

    def __init__(self, options=None, session=None, server_time=1_700_000_000_000):
        super().__init__('coinm', options, session)
        self.server_time = server_time

    async def get_server_time(self) -> int:
        return self.server_time


def make_client(response=None, status=200, headers=None, **option_overrides):
    option_values = {"api_key": "key", "api_secret": "secret", "disable_time_sync": True}
    option_values.update(option_overrides)
    client = StubRestClient(RestClientOptions(**option_values))
    body = response if isinstance(response, str) else json.dumps(response if response is not None else {})
    client._execute = AsyncMock(return_value=(status, headers or {}, body))
    return client


def sent_request(client, call_index=-1):
    method, url, headers, data = client._execute.call_args_list[call_index].args
    return method, url, headers, data


class TestRequestBuilding:

    @pytest.mark.asyncio
    async def test_public_get_sends_query_without_signature(self):
        client = make_client({"ok": True})

        result = await client.get('dapi/v1/depth', {'symbol': 'BTCUSD_PERP', 'limit': 5, 'extra': None})

        method, url, headers, data = sent_request(client)
        assert result == {"ok": True}
        assert method == 'GET'
        assert str(url) == 'https://dapi.binance.com/dapi/v1/depth?symbol=BTCUSD_PERP&limit=5'
        assert headers == {'X-MBX-APIKEY': 'key'}
        assert data is None

    @pytest.mark.asyncio
    async def test_private_get_is_signed(self):
        client = make_client([])

        await client.get_private('dapi/v1/openOrders', {'symbol': 'BTCUSD_PERP'})

        method, url, headers, data = sent_request(client)
        query = parse_qs(url.raw_query_string)
        assert method == 'GET'
        assert url.path == '/dapi/v1/openOrders'
        assert query['symbol'] == ['BTCUSD_PERP']
        assert query['recvWindow'] == ['5000']
        assert 'timestamp' in query
        assert 'signature' in query

    @pytest.mark.asyncio
    async def test_signature_covers_sent_payload(self):
        client = make_client({})

        await client.post_private('dapi/v1/leverage', {'symbol': 'BTCUSD_PERP', 'leverage': 10})

        method, url, headers, data = sent_request(client)
        payload, signature = data.rsplit('&signature=', 1)
        assert method == 'POST'
        assert headers['Content-Type'] == 'application/x-www-form-urlencoded'
        assert payload.startswith('symbol=BTCUSD_PERP&leverage=10&timestamp=')
        assert signature == client.auth.generate_signature(payload)

    @pytest.mark.asyncio
    async def test_private_delete_puts_signature_in_query(self):
        client = make_client({})

        await client.delete_private('dapi/v1/order', {'symbol': 'BTCUSD_PERP', 'orderId': 1})

        method, url, headers, data = sent_request(client)
        assert method == 'DELETE'
        assert data is None
        assert 'signature' in parse_qs(url.raw_query_string)

    @pytest.mark.asyncio
    async def test_base_url_override(self):
        client = make_client({}, base_url='http://localhost:9000')

        await client.get('dapi/v1/ping')

        method, url, headers, data = sent_request(client)
        assert str(url) == 'http://localhost:9000/dapi/v1/ping'

    @pytest.mark.asyncio
    async def test_public_call_without_credentials_has_no_key_header(self):
        client = make_client({}, api_key="", api_secret="")

        await client.get('dapi/v1/ping')

        method, url, headers, data = sent_request(client)
        assert headers == {}

    @pytest.mark.asyncio
    async def test_private_call_without_credentials_is_refused(self):
        client = make_client({}, api_key="", api_secret="")

        with pytest.raises(BinanceRequestException):
            await client.get_private('dapi/v2/balance')

        client._execute.assert_not_called()


class TestResponseHandling:

    @pytest.mark.asyncio
    async def test_http_error_raises_api_exception(self):
        client = make_client({"code": -1121, "msg": "Invalid symbol."}, status=400)

        with pytest.raises(BinanceAPIException) as exc_info:
            await client.get('dapi/v1/depth', {'symbol': 'NOPE'})

        assert exc_info.value.code == -1121
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid symbol."

    @pytest.mark.asyncio
    async def test_non_json_error_body_still_raises_api_exception(self):
        client = make_client("<html>Bad Gateway</html>", status=502)

        with pytest.raises(BinanceAPIException) as exc_info:
            await client.get('dapi/v1/ping')

        assert exc_info.value.status_code == 502
        assert exc_info.value.code == -1
        assert 'Bad Gateway' in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ['[1]', 'null', '"oops"', '{"error": "x"}', '{"code": -1003}'])
    async def test_error_body_without_code_and_msg_is_wrapped(self, body):
        client = make_client(body, status=503)

        with pytest.raises(BinanceAPIException) as exc_info:
            await client.get('dapi/v1/ping')

        assert exc_info.value.status_code == 503
        assert exc_info.value.code == -1
        assert exc_info.value.message == body

    @pytest.mark.asyncio
    async def test_invalid_json_success_body_raises_request_exception(self):
        client = make_client("not json")

        with pytest.raises(BinanceRequestException):
            await client.get('dapi/v1/ping')

    @pytest.mark.asyncio
    async def test_error_object_in_success_body_is_returned(self):
        error = {"code": -2019, "msg": "Margin is insufficient."}
        client = make_client(error)

        assert await client.post_private('dapi/v1/order', {'symbol': 'BTCUSD_PERP'}) == error

    @pytest.mark.asyncio
    async def test_rate_limit_headers_are_tracked(self):
        client = make_client({}, headers={'x-mbx-used-weight-1m': '17', 'x-mbx-order-count-1m': '3'})

        assert client.get_rate_limit_states()['last_updated'] is None
        await client.get('dapi/v1/ping')

        states = client.get_rate_limit_states()
        assert states['x-mbx-used-weight-1m'] == 17
        assert states['x-mbx-order-count-1m'] == 3
        assert states['x-mbx-used-weight'] is None
        assert states['last_updated'] is not None


class TestRetries:

    @pytest.mark.asyncio
    async def test_get_is_retried_on_network_error(self):
        client = make_client()
        client._execute.side_effect = [aiohttp.ClientConnectionError("reset"), (200, {}, '{"ok": true}')]

        with patch("asyncio.sleep", AsyncMock()) as sleep:
            result = await client.get('dapi/v1/ping')

        assert result == {"ok": True}
        assert client._execute.call_count == 2
        sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_get_gives_up_after_max_retries(self):
        client = make_client(max_retries=2, retry_delay=0.5)
        client._execute.side_effect = aiohttp.ClientConnectionError("down")

        with patch("asyncio.sleep", AsyncMock()) as sleep:
            with pytest.raises(BinanceRequestException):
                await client.get('dapi/v1/ping')

        assert client._execute.call_count == 3
        assert [call.args[0] for call in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_post_is_never_retried(self):
        client = make_client()
        client._execute.side_effect = aiohttp.ClientConnectionError("reset")

        with patch("asyncio.sleep", AsyncMock()):
            with pytest.raises(BinanceRequestException):
                await client.post_private('dapi/v1/order', {'symbol': 'BTCUSD_PERP'})

        assert client._execute.call_count == 1

    @pytest.mark.asyncio
    async def test_http_errors_are_not_retried(self):
        client = make_client({"code": -1003, "msg": "Too many requests."}, status=429)

        with pytest.raises(BinanceAPIException):
            await client.get('dapi/v1/ping')

        assert client._execute.call_count == 1


class TestTimeSync:

    @pytest.mark.asyncio
    async def test_offset_uses_request_midpoint(self):
        client = make_client(disable_time_sync=False)
        client.server_time = 1_000_500
        client._now_ms = MagicMock(side_effect=[1_000_000, 1_000_200])

        await client.sync_time()

        assert client.get_time_offset() == 400

    @pytest.mark.asyncio
    async def test_signed_calls_sync_once_per_interval(self):
        client = make_client({}, disable_time_sync=False)
        client.get_server_time = AsyncMock(return_value=1_700_000_000_000)

        await client.get_private('dapi/v2/balance')
        await client.get_private('dapi/v2/balance')

        assert client.get_server_time.await_count == 1

    @pytest.mark.asyncio
    async def test_public_calls_do_not_sync(self):
        client = make_client({}, disable_time_sync=False)
        client.get_server_time = AsyncMock(return_value=1_700_000_000_000)

        await client.get('dapi/v1/ping')

        client.get_server_time.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_time_sync_is_skipped(self):
        client = make_client({})
        client.get_server_time = AsyncMock(return_value=1_700_000_000_000)

        await client.get_private('dapi/v2/balance')

        client.get_server_time.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_sync_does_not_block_request(self):
        client = make_client([{"asset": "BTC"}], disable_time_sync=False)
        client.get_server_time = AsyncMock(side_effect=BinanceRequestException("time endpoint down"))

        result = await client.get_private('dapi/v2/balance')

        assert result == [{"asset": "BTC"}]
        assert client.get_time_offset() == 0

    @pytest.mark.asyncio
    async def test_failed_sync_waits_before_retrying(self):
        client = make_client([], disable_time_sync=False)
        client.get_server_time = AsyncMock(side_effect=BinanceRequestException("time endpoint down"))
        client._now_ms = MagicMock(return_value=5_000_000)

        await client.get_private('dapi/v2/balance')
        await client.get_private('dapi/v2/balance')
        assert client.get_server_time.await_count == 1

        client._now_ms.return_value = 5_000_000 + TIME_SYNC_RETRY_MS
        await client.get_private('dapi/v2/balance')
        assert client.get_server_time.await_count == 2


class TestSessionLifecycle:

    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self):
        session = MagicMock()
        session.close = AsyncMock()
        client = StubRestClient(RestClientOptions(), session=session)

        async with client:
            pass

        session.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owned_session_is_closed(self):
        client = StubRestClient(RestClientOptions())
        session = await client._get_session()

        await client.close()

        assert session.closed
        assert client._session is None
