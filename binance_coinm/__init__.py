"""
Binance COIN-M futures REST client.
"""

from .exchange import CoinMClient, RestClientOptions

__version__ = "0.1.0"

__all__ = [
    'CoinMClient',
    'RestClientOptions'
]
