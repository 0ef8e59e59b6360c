import os
import logging
from dotenv import load_dotenv

from binance_coinm.exchange.core.exchange_config import RestClientOptions


def _read_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def reload_env():
    """Reload environment variables from .env file."""
    load_dotenv(override=True)  # override=True forces reload

    # Update global variables with new values
    global BINANCE_API_KEY, BINANCE_API_SECRET, BINANCE_TESTNET, BINANCE_RECV_WINDOW

    BINANCE_API_KEY = os.getenv("BINANCE_API_KEY", "")
    BINANCE_API_SECRET = os.getenv("BINANCE_API_SECRET", "")
    BINANCE_TESTNET = _read_bool("BINANCE_TESTNET", "True")
    BINANCE_RECV_WINDOW = int(os.getenv("BINANCE_RECV_WINDOW", "5000"))

    logging.info("Environment variables reloaded successfully")
    if BINANCE_API_KEY:
        logging.info(f"Using Binance API Key: {BINANCE_API_KEY[:10]}...{BINANCE_API_KEY[-5:]}")
    else:
        logging.info("Using Binance API Key: None")


def build_rest_client_options() -> RestClientOptions:
    """Build client options from the currently loaded environment."""
    return RestClientOptions(
        api_key=BINANCE_API_KEY,
        api_secret=BINANCE_API_SECRET,
        recv_window=BINANCE_RECV_WINDOW,
    )


load_dotenv()

# Binance COIN-M
BINANCE_API_KEY = os.getenv("BINANCE_API_KEY", "")
BINANCE_API_SECRET = os.getenv("BINANCE_API_SECRET", "")
BINANCE_TESTNET = _read_bool("BINANCE_TESTNET", "True")
BINANCE_RECV_WINDOW = int(os.getenv("BINANCE_RECV_WINDOW", "5000"))
