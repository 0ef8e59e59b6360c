"""
Configuration Module

Environment settings and logging setup for the COIN-M client.
"""

from .logging_config import (
    ProductionLoggingConfig, setup_production_logging,
    get_request_logger, get_order_logger, get_error_logger
)

__all__ = [
    'ProductionLoggingConfig',
    'setup_production_logging',
    'get_request_logger',
    'get_order_logger',
    'get_error_logger'
]
