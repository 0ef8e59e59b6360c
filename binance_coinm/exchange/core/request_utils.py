"""
Request Utilities

Shared helpers for building requests: base URL lookup per account category,
client order id generation and checks, and parameter serialisation.
"""

import json
import logging
import secrets
from decimal import Decimal
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .exchange_config import RestClientOptions

logger = logging.getLogger(__name__)

# Account categories ("base url keys")
COINM = 'coinm'
COINM_TEST = 'coinmtest'

REST_BASE_URLS: Dict[str, str] = {
    COINM: 'https://dapi.binance.com',
    COINM_TEST: 'https://testnet.binancefuture.com',
}

FUTURES_ORDER_ID_PREFIX = '15PC4ZJy'
SPOT_ORDER_ID_PREFIX = 'U5D79M5B'

ORDER_ID_PREFIXES: Dict[str, str] = {
    COINM: FUTURES_ORDER_ID_PREFIX,
    COINM_TEST: FUTURES_ORDER_ID_PREFIX,
}

# Same alphabet as nanoid: url-safe and accepted by the newClientOrderId pattern
ORDER_ID_ALPHABET = 'useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict'
ORDER_ID_RANDOM_LENGTH = 20


def get_rest_base_url(client_id: str, options: Optional[RestClientOptions] = None) -> str:
    """
    Resolve the REST base URL for an account category.

    Args:
        client_id: Account category, e.g. 'coinm' or 'coinmtest'
        options: Client options; options.base_url wins when set

    Returns:
        Base URL without a trailing slash
    """
    if options is not None and options.base_url:
        return options.base_url.rstrip('/')

    if client_id not in REST_BASE_URLS:
        raise ValueError(f"Unknown account category '{client_id}'. Available: {list(REST_BASE_URLS)}")

    return REST_BASE_URLS[client_id]


def get_server_time_endpoint(client_id: str) -> str:
    if client_id not in REST_BASE_URLS:
        raise ValueError(f"Unknown account category '{client_id}'. Available: {list(REST_BASE_URLS)}")
    return 'dapi/v1/time'


def get_order_id_prefix(client_id: str) -> str:
    return ORDER_ID_PREFIXES.get(client_id, SPOT_ORDER_ID_PREFIX)


def generate_new_order_id(client_id: str) -> str:
    """
    Generate a client order id carrying the reserved prefix of the account category.

    Returns:
        An id of the form 'x-<prefix><20 random chars>'
    """
    random_part = ''.join(secrets.choice(ORDER_ID_ALPHABET) for _ in range(ORDER_ID_RANDOM_LENGTH))
    return f"x-{get_order_id_prefix(client_id)}{random_part}"


def log_invalid_order_id(order_id_property: str, expected_prefix: str, params: Dict[str, Any],
                         log: logging.Logger = logger) -> None:
    log.warning(
        f"'{order_id_property}' invalid - it should be prefixed with '{expected_prefix}'. "
        f"Use generate_new_order_id() to create a valid id on demand. Original request: {params}"
    )


def as_array(value: Any) -> List[Any]:
    """Wrap a single response object in a list; lists pass through."""
    if isinstance(value, list):
        return value
    return [value]


def _serialise_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(',', ':'))
    # Binance rejects exponent notation such as 5e-05
    if isinstance(value, float):
        return format(Decimal(repr(value)), 'f')
    if isinstance(value, Decimal):
        return format(value, 'f')
    return str(value)


def serialise_params(params: Optional[Dict[str, Any]], filter_undefined: bool = True) -> str:
    """
    Serialise a parameter bag into a query string.

    Key order follows the bag's insertion order, so the string that gets
    signed is exactly the string that gets sent.

    Args:
        params: Parameter bag
        filter_undefined: Drop keys whose value is None

    Returns:
        Percent-encoded 'key=value&key=value' string
    """
    if not params:
        return ''

    parts = []
    for key, value in params.items():
        if value is None:
            if filter_undefined:
                continue
            parts.append(f"{key}=")
            continue
        parts.append(f"{key}={quote(_serialise_value(value), safe='')}")

    return '&'.join(parts)
