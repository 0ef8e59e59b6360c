import os
import sys
import asyncio
import logging

# Add the project root to Python path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, project_root)

from binance.exceptions import BinanceAPIException, BinanceRequestException

from binance_coinm.config import settings
from binance_coinm.config.logging_config import setup_production_logging
from binance_coinm.exchange.binance import CoinMBalance, CoinMPosition, CoinMClient

# --- Setup ---
logging_config = setup_production_logging()
logger = logging.getLogger("scripts.check_coinm_account")
logger.setLevel(logging.INFO)
logger.addHandler(logging.StreamHandler(sys.stdout))


async def check_account():
    """
    Connects to Binance COIN-M futures using the settings in .env and prints
    server time, wallet balances and open positions.
    """
    options = settings.build_rest_client_options()
    if not options.has_credentials:
        logger.error("API Key or Secret not found in .env file.")
        logger.error("Please ensure your .env file is in the root directory and contains:")
        logger.error("BINANCE_API_KEY=your_key")
        logger.error("BINANCE_API_SECRET=your_secret")
        return

    network = 'Testnet' if settings.BINANCE_TESTNET else 'Mainnet'
    logger.info(f"Connecting to Binance COIN-M ({network})...")

    async with CoinMClient(options, use_testnet=settings.BINANCE_TESTNET) as client:
        try:
            server_time = await client.get_server_time()
            logger.info(f"Server time: {server_time} (local offset {client.get_time_offset()}ms)")

            balances = [CoinMBalance.from_dict(item) for item in await client.get_balance()]
            positions = [CoinMPosition.from_dict(item) for item in await client.get_positions()]
        except (BinanceAPIException, BinanceRequestException) as e:
            logger.error(f"Account check failed: {e}")
            return

        print("\n" + "=" * 70)
        print(f"          BINANCE COIN-M {network.upper()} ACCOUNT CHECK")
        print("=" * 70)
        print(f"{'Asset':<8} {'Balance':<18} {'Available':<18} {'Cross UnPnL':<15}")
        print("-" * 70)
        for balance in balances:
            if balance.balance == 0 and balance.cross_un_pnl == 0:
                continue
            print(f"{balance.asset:<8} {balance.balance:<18.8f} {balance.available_balance:<18.8f} {balance.cross_un_pnl:<15.8f}")

        open_positions = [position for position in positions if position.position_amt != 0]
        print("\n" + "-" * 70)
        print(f"Open positions: {len(open_positions)}")
        for position in open_positions:
            print(f"  {position.symbol:<16} {position.position_side:<6} amt={position.position_amt} "
                  f"entry={position.entry_price} uPnL={position.unrealized_pnl}")

        print(f"\nRate limit usage: {client.get_rate_limit_states()}")


if __name__ == "__main__":
    asyncio.run(check_account())
