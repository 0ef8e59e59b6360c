"""
Exchange Module

This module contains all exchange-related functionality.
"""

# Core transport components
from .core import BaseRestClient, BinanceAuth, RestClientOptions

# Binance COIN-M implementation
from .binance import (
    CoinMClient, CoinMOrder, CoinMPosition,
    CoinMBalance, CoinMTrade, CoinMIncome, is_order_error
)

__all__ = [
    # Core
    'BaseRestClient',
    'BinanceAuth',
    'RestClientOptions',

    # Binance COIN-M
    'CoinMClient',
    'CoinMOrder',
    'CoinMPosition',
    'CoinMBalance',
    'CoinMTrade',
    'CoinMIncome',
    'is_order_error'
]
