"""
Core Exchange Module

This module contains the signed REST transport and its helpers.
"""

from .exchange_config import RestClientOptions
from .binance_auth import BinanceAuth
from .rest_client_base import BaseRestClient
from .request_utils import (
    COINM, COINM_TEST, as_array, generate_new_order_id,
    get_order_id_prefix, get_rest_base_url, get_server_time_endpoint
)

__all__ = [
    'RestClientOptions',
    'BinanceAuth',
    'BaseRestClient',
    'COINM',
    'COINM_TEST',
    'as_array',
    'generate_new_order_id',
    'get_order_id_prefix',
    'get_rest_base_url',
    'get_server_time_endpoint'
]
