"""
Binance COIN-M Futures Client

One coroutine per COIN-M REST endpoint. Each method fixes the verb, path and
security of its endpoint and hands the parameter bag to the signed transport.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

import aiohttp

from ..core.exchange_config import RestClientOptions
from ..core.request_utils import (
    COINM, COINM_TEST,
    as_array,
    generate_new_order_id,
    get_order_id_prefix,
    get_server_time_endpoint,
    log_invalid_order_id,
)
from ..core.rest_client_base import BaseRestClient

logger = logging.getLogger(__name__)

Params = Dict[str, Any]
JsonObject = Dict[str, Any]


class CoinMClient(BaseRestClient):
    """
    Binance COIN-margined futures REST client.

    The account category (live or testnet) is fixed at construction and
    selects both the base URL and the client order id prefix.
    """

    def __init__(self, options: Optional[RestClientOptions] = None, use_testnet: bool = False,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize the COIN-M client.

        Args:
            options: Credentials and transport options
            use_testnet: Whether to use the futures testnet
            session: Optional shared aiohttp session
        """
        client_id = COINM_TEST if use_testnet else COINM
        super().__init__(client_id, options, session)
        self.is_testnet = use_testnet

    async def get_server_time(self) -> int:
        response = await self.get(get_server_time_endpoint(self.client_id))
        return response['serverTime']

    # User Data Stream
    async def get_futures_user_data_listen_key(self) -> Dict[str, str]:
        return await self.post('dapi/v1/listenKey')

    async def keep_alive_futures_user_data_listen_key(self) -> JsonObject:
        return await self.put('dapi/v1/listenKey')

    async def close_futures_user_data_listen_key(self) -> JsonObject:
        return await self.delete('dapi/v1/listenKey')

    # Market Data
    async def test_connectivity(self) -> JsonObject:
        return await self.get('dapi/v1/ping')

    async def get_exchange_info(self) -> JsonObject:
        return await self.get('dapi/v1/exchangeInfo')

    async def get_order_book(self, params: Params) -> JsonObject:
        return await self.get('dapi/v1/depth', params)

    async def get_recent_trades(self, params: Params) -> List[JsonObject]:
        return await self.get('dapi/v1/trades', params)

    async def get_historical_trades(self, params: Params) -> List[JsonObject]:
        """Old trades lookup. Needs an API key header but no signature."""
        return await self.get('dapi/v1/historicalTrades', params)

    async def get_aggregate_trades(self, params: Params) -> List[JsonObject]:
        return await self.get('dapi/v1/aggTrades', params)

    async def get_mark_price(self, params: Optional[Params] = None) -> List[JsonObject]:
        return await self.get('dapi/v1/premiumIndex', params)

    async def get_funding_rate_history(self, params: Params) -> List[JsonObject]:
        return await self.get('dapi/v1/fundingRate', params)

    async def get_klines(self, params: Params) -> List[List[Any]]:
        return await self.get('dapi/v1/klines', params)

    async def get_continuous_contract_klines(self, params: Params) -> List[List[Any]]:
        return await self.get('dapi/v1/continuousKlines', params)

    async def get_index_price_klines(self, params: Params) -> List[List[Any]]:
        return await self.get('dapi/v1/indexPriceKlines', params)

    async def get_mark_price_klines(self, params: Params) -> List[List[Any]]:
        return await self.get('dapi/v1/markPriceKlines', params)

    async def get_24hr_change_statistics(self, params: Optional[Params] = None) -> Union[List[JsonObject], JsonObject]:
        return await self.get('dapi/v1/ticker/24hr', params)

    async def get_symbol_price_ticker(self, params: Optional[Params] = None) -> Union[List[JsonObject], JsonObject]:
        return await self.get('dapi/v1/ticker/price', params)

    async def get_symbol_order_book_ticker(self, params: Optional[Params] = None) -> List[JsonObject]:
        """Best bid/ask. Always a list, even when a single symbol is requested."""
        response = await self.get('dapi/v1/ticker/bookTicker', params)
        return as_array(response)

    async def get_open_interest(self, params: Params) -> JsonObject:
        return await self.get('dapi/v1/openInterest', params)

    async def get_open_interest_statistics(self, params: Params) -> List[JsonObject]:
        return await self.get('futures/data/openInterestHist', params)

    async def get_basis(self, params: Params) -> List[JsonObject]:
        return await self.get('futures/data/basis', params)

    # Account / Trade
    async def set_position_mode(self, params: Params) -> JsonObject:
        return await self.post_private('dapi/v1/positionSide/dual', params)

    async def get_current_position_mode(self) -> JsonObject:
        return await self.get_private('dapi/v1/positionSide/dual')

    async def get_positions(self) -> List[JsonObject]:
        return await self.get_private('dapi/v1/positionRisk')

    async def get_account_trades(self, params: Params) -> List[JsonObject]:
        return await self.get_private('dapi/v1/userTrades', params)

    async def submit_new_order(self, params: Params) -> JsonObject:
        """
        Place a new order.

        A missing newClientOrderId is generated and written into params.
        The response may be an error object ({"code", "msg"}) instead of an order.
        """
        self._validate_order_id(params, 'newClientOrderId')
        return await self.post_private('dapi/v1/order', params)

    async def submit_multiple_orders(self, orders: List[Params]) -> List[JsonObject]:
        """
        Place up to 5 orders in one request.

        This does not raise for rejected orders: each rejection comes back as an
        error object at the same index as its order. quantity and price should
        be sent as strings.
        """
        serialised_orders = []
        for order in orders:
            order_to_serialise = dict(order)
            self._validate_order_id(order_to_serialise, 'newClientOrderId')
            serialised_orders.append(json.dumps(order_to_serialise, separators=(',', ':')))

        request_body = {
            'batchOrders': f"[{','.join(serialised_orders)}]",
        }
        return await self.post_private('dapi/v1/batchOrders', request_body)

    async def modify_order(self, params: Params) -> JsonObject:
        return await self.put_private('dapi/v1/order', params)

    async def get_order_modify_history(self, params: Params) -> List[JsonObject]:
        return await self.get_private('dapi/v1/orderAmendment', params)

    async def get_order(self, params: Params) -> JsonObject:
        return await self.get_private('dapi/v1/order', params)

    async def cancel_order(self, params: Params) -> JsonObject:
        return await self.delete_private('dapi/v1/order', params)

    async def cancel_all_open_orders(self, params: Params) -> JsonObject:
        return await self.delete_private('dapi/v1/allOpenOrders', params)

    async def cancel_multiple_orders(self, params: Params) -> List[JsonObject]:
        return await self.delete_private('dapi/v1/batchOrders', params)

    async def set_cancel_orders_on_timeout(self, params: Params) -> JsonObject:
        """Auto-cancel all open orders for a symbol after a countdown."""
        return await self.post_private('dapi/v1/countdownCancelAll', params)

    async def get_current_open_order(self, params: Params) -> JsonObject:
        return await self.get_private('dapi/v1/openOrder', params)

    async def get_all_open_orders(self, params: Optional[Params] = None) -> List[JsonObject]:
        return await self.get_private('dapi/v1/openOrders', params)

    async def get_all_orders(self, params: Params) -> List[JsonObject]:
        return await self.get_private('dapi/v1/allOrders', params)

    async def get_balance(self) -> List[JsonObject]:
        return await self.get_private('dapi/v2/balance')

    async def get_account_information(self) -> JsonObject:
        return await self.get_private('dapi/v2/account')

    async def set_leverage(self, params: Params) -> JsonObject:
        return await self.post_private('dapi/v1/leverage', params)

    async def set_margin_type(self, params: Params) -> JsonObject:
        return await self.post_private('dapi/v1/marginType', params)

    async def set_isolated_position_margin(self, params: Params) -> JsonObject:
        return await self.post_private('dapi/v1/positionMargin', params)

    async def get_position_margin_change_history(self, params: Params) -> Any:
        return await self.get_private('dapi/v1/positionMargin/history', params)

    async def get_income_history(self, params: Optional[Params] = None) -> List[JsonObject]:
        return await self.get_private('dapi/v1/income', params)

    async def get_notional_and_leverage_brackets(
        self, params: Optional[Params] = None
    ) -> Union[List[JsonObject], JsonObject]:
        return await self.get_private('dapi/v1/leverageBracket', params)

    async def get_adl_quantile_estimation(self, params: Optional[Params] = None) -> Any:
        return await self.get_private('dapi/v1/adlQuantile', params)

    async def get_force_orders(self, params: Optional[Params] = None) -> List[JsonObject]:
        return await self.get_private('dapi/v1/forceOrders', params)

    async def get_api_quantitative_rules_indicators(self, params: Optional[Params] = None) -> Any:
        return await self.get_private('dapi/v1/apiTradingStatus', params)

    async def get_account_commission_rate(self, params: Params) -> JsonObject:
        return await self.get_private('dapi/v1/commissionRate', params)

    def _validate_order_id(self, params: Params, order_id_property: str) -> None:
        """
        Fill in a missing client order id, or warn when a supplied one lacks
        the prefix expected for this account category. Never raises.
        """
        if not params.get(order_id_property):
            params[order_id_property] = generate_new_order_id(self.client_id)
            return

        expected_order_id_prefix = f"x-{get_order_id_prefix(self.client_id)}"
        if not str(params[order_id_property]).startswith(expected_order_id_prefix):
            log_invalid_order_id(order_id_property, expected_order_id_prefix, params, logger)
