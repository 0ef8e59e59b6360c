"""
Binance Exchange Module

This module contains the Binance COIN-M futures client and response models.
"""

from .coinm_client import CoinMClient
from .coinm_models import (
    CoinMOrder, CoinMPosition, CoinMBalance,
    CoinMTrade, CoinMIncome, is_order_error
)

__all__ = [
    'CoinMClient',
    'CoinMOrder',
    'CoinMPosition',
    'CoinMBalance',
    'CoinMTrade',
    'CoinMIncome',
    'is_order_error'
]
