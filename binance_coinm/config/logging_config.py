"""
Centralized Logging Configuration

Sets up separate log streams for the COIN-M client so request traffic,
order-id warnings and failures can be inspected independently.

Log Categories:
- Requests: File-based, transport activity (signing, retries, time sync)
- Orders: File-based, order submission and client order id warnings
- Errors: File-based, errors only
- General: File-based, everything under the package
- Console: warnings and above
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

PACKAGE_LOGGER = 'binance_coinm'
REQUEST_LOGGER = 'binance_coinm.exchange.core'
ORDER_LOGGER = 'binance_coinm.exchange.binance'


class ProductionLoggingConfig:
    """Production-ready logging configuration with separated log streams."""

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # Create timestamped log files for better organization
        timestamp = datetime.now().strftime("%Y%m%d")
        self.log_files = {
            'requests': self.log_dir / f"requests_{timestamp}.log",
            'orders': self.log_dir / f"orders_{timestamp}.log",
            'errors': self.log_dir / f"errors_{timestamp}.log",
            'general': self.log_dir / f"coinm_client_{timestamp}.log"
        }

        self._setup_loggers()

    def _setup_loggers(self):
        """Set up all logger configurations."""
        self._create_formatters()
        self._setup_handlers()
        self._configure_specific_loggers()

    def _create_formatters(self):
        """Create formatters for different log types."""
        # Detailed formatter for files
        self.file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Simple formatter for console
        self.console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

    def _setup_handlers(self):
        """Set up file and console handlers."""
        general_handler = logging.FileHandler(self.log_files['general'], encoding='utf-8')
        general_handler.setLevel(logging.DEBUG)
        general_handler.setFormatter(self.file_formatter)

        request_handler = logging.FileHandler(self.log_files['requests'], encoding='utf-8')
        request_handler.setLevel(logging.DEBUG)
        request_handler.setFormatter(self.file_formatter)

        order_handler = logging.FileHandler(self.log_files['orders'], encoding='utf-8')
        order_handler.setLevel(logging.INFO)
        order_handler.setFormatter(self.file_formatter)

        error_handler = logging.FileHandler(self.log_files['errors'], encoding='utf-8')
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(self.file_formatter)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(self.console_formatter)

        # Store handlers for specific logger assignment
        self.handlers = {
            'general': general_handler,
            'requests': request_handler,
            'orders': order_handler,
            'errors': error_handler,
            'console': console_handler
        }

    def _configure_specific_loggers(self):
        """Configure specific loggers with appropriate handlers."""
        # Package root: sees everything propagated from the submodules
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.handlers.clear()
        package_logger.setLevel(logging.DEBUG)
        package_logger.addHandler(self.handlers['general'])
        package_logger.addHandler(self.handlers['errors'])
        package_logger.addHandler(self.handlers['console'])
        package_logger.propagate = False

        request_logger = logging.getLogger(REQUEST_LOGGER)
        request_logger.handlers.clear()
        request_logger.addHandler(self.handlers['requests'])

        order_logger = logging.getLogger(ORDER_LOGGER)
        order_logger.handlers.clear()
        order_logger.addHandler(self.handlers['orders'])

        # Reduce noise from third-party libraries
        logging.getLogger('aiohttp').setLevel(logging.WARNING)

    def close(self):
        """Detach and close every handler this config installed."""
        for logger_name in (PACKAGE_LOGGER, REQUEST_LOGGER, ORDER_LOGGER):
            logger = logging.getLogger(logger_name)
            for handler in list(logger.handlers):
                if handler in self.handlers.values():
                    logger.removeHandler(handler)
        logging.getLogger(PACKAGE_LOGGER).propagate = True
        for handler in self.handlers.values():
            handler.close()


def setup_production_logging(log_dir: str = "logs") -> ProductionLoggingConfig:
    """Set up production logging configuration."""
    return ProductionLoggingConfig(log_dir)


def get_request_logger() -> logging.Logger:
    """Get logger specifically for transport requests."""
    return logging.getLogger(REQUEST_LOGGER)


def get_order_logger() -> logging.Logger:
    """Get logger specifically for order submission."""
    return logging.getLogger(ORDER_LOGGER)


def get_error_logger() -> logging.Logger:
    """Get the package-level logger that feeds the error stream."""
    return logging.getLogger(PACKAGE_LOGGER)
