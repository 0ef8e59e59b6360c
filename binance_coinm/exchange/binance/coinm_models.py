"""
COIN-M Data Models

Data models for Binance COIN-margined futures responses.
Following Clean Code principles with clear, focused models.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional


def is_order_error(item: Any) -> bool:
    """
    Tell a per-order error object apart from a successful order result.

    Batch endpoints answer with HTTP 200 and put {"code", "msg"} objects at
    the index of every rejected order.
    """
    return isinstance(item, dict) and 'code' in item and 'msg' in item and 'orderId' not in item


@dataclass
class CoinMOrder:
    """Data model for COIN-M order information."""

    order_id: str
    symbol: str
    pair: str
    side: str
    order_type: str
    orig_qty: float
    price: Optional[float] = None
    stop_price: Optional[float] = None
    status: str = "NEW"
    executed_qty: float = 0.0
    cum_base: float = 0.0
    avg_price: float = 0.0
    client_order_id: Optional[str] = None
    position_side: str = "BOTH"
    time_in_force: Optional[str] = None
    working_type: Optional[str] = None
    reduce_only: bool = False
    close_position: bool = False
    time: Optional[int] = None
    update_time: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'orderId': self.order_id,
            'symbol': self.symbol,
            'pair': self.pair,
            'side': self.side,
            'type': self.order_type,
            'origQty': self.orig_qty,
            'price': self.price,
            'stopPrice': self.stop_price,
            'status': self.status,
            'executedQty': self.executed_qty,
            'cumBase': self.cum_base,
            'avgPrice': self.avg_price,
            'clientOrderId': self.client_order_id,
            'positionSide': self.position_side,
            'timeInForce': self.time_in_force,
            'workingType': self.working_type,
            'reduceOnly': self.reduce_only,
            'closePosition': self.close_position,
            'time': self.time,
            'updateTime': self.update_time
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CoinMOrder':
        """Create from dictionary representation."""
        return cls(
            order_id=str(data.get('orderId', '')),
            symbol=data.get('symbol', ''),
            pair=data.get('pair', ''),
            side=data.get('side', ''),
            order_type=data.get('type', ''),
            orig_qty=float(data.get('origQty', 0)),
            price=float(data['price']) if data.get('price') else None,
            stop_price=float(data['stopPrice']) if data.get('stopPrice') else None,
            status=data.get('status', 'NEW'),
            executed_qty=float(data.get('executedQty', 0)),
            cum_base=float(data.get('cumBase', 0)),
            avg_price=float(data.get('avgPrice', 0)),
            client_order_id=data.get('clientOrderId'),
            position_side=data.get('positionSide', 'BOTH'),
            time_in_force=data.get('timeInForce'),
            working_type=data.get('workingType'),
            reduce_only=data.get('reduceOnly', False),
            close_position=data.get('closePosition', False),
            time=data.get('time'),
            update_time=data.get('updateTime')
        )


@dataclass
class CoinMPosition:
    """Data model for COIN-M position risk information."""

    symbol: str
    position_amt: float
    entry_price: float
    mark_price: float
    unrealized_pnl: float
    liquidation_price: float
    leverage: int
    margin_type: str
    max_qty: float = 0.0
    isolated_margin: float = 0.0
    is_auto_add_margin: bool = False
    position_side: str = "BOTH"
    notional_value: float = 0.0
    isolated_wallet: float = 0.0
    update_time: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'symbol': self.symbol,
            'positionAmt': self.position_amt,
            'entryPrice': self.entry_price,
            'markPrice': self.mark_price,
            'unRealizedProfit': self.unrealized_pnl,
            'liquidationPrice': self.liquidation_price,
            'leverage': self.leverage,
            'marginType': self.margin_type,
            'maxQty': self.max_qty,
            'isolatedMargin': self.isolated_margin,
            'isAutoAddMargin': self.is_auto_add_margin,
            'positionSide': self.position_side,
            'notionalValue': self.notional_value,
            'isolatedWallet': self.isolated_wallet,
            'updateTime': self.update_time
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CoinMPosition':
        """Create from dictionary representation."""
        # The API sends isAutoAddMargin as the string "true"/"false"
        auto_add = data.get('isAutoAddMargin', False)
        if isinstance(auto_add, str):
            auto_add = auto_add.lower() == 'true'

        return cls(
            symbol=data.get('symbol', ''),
            position_amt=float(data.get('positionAmt', 0)),
            entry_price=float(data.get('entryPrice', 0)),
            mark_price=float(data.get('markPrice', 0)),
            unrealized_pnl=float(data.get('unRealizedProfit', 0)),
            liquidation_price=float(data.get('liquidationPrice', 0)),
            leverage=int(data.get('leverage', 1)),
            margin_type=data.get('marginType', 'cross'),
            max_qty=float(data.get('maxQty', 0)),
            isolated_margin=float(data.get('isolatedMargin', 0)),
            is_auto_add_margin=auto_add,
            position_side=data.get('positionSide', 'BOTH'),
            notional_value=float(data.get('notionalValue', 0)),
            isolated_wallet=float(data.get('isolatedWallet', 0)),
            update_time=data.get('updateTime')
        )


@dataclass
class CoinMBalance:
    """Data model for COIN-M balance information."""

    asset: str
    balance: float
    cross_wallet_balance: float
    cross_un_pnl: float
    available_balance: float
    withdraw_available: float
    account_alias: str = ""
    update_time: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'accountAlias': self.account_alias,
            'asset': self.asset,
            'balance': self.balance,
            'crossWalletBalance': self.cross_wallet_balance,
            'crossUnPnl': self.cross_un_pnl,
            'availableBalance': self.available_balance,
            'withdrawAvailable': self.withdraw_available,
            'updateTime': self.update_time
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CoinMBalance':
        """Create from dictionary representation."""
        return cls(
            asset=data.get('asset', ''),
            balance=float(data.get('balance', 0)),
            cross_wallet_balance=float(data.get('crossWalletBalance', 0)),
            cross_un_pnl=float(data.get('crossUnPnl', 0)),
            available_balance=float(data.get('availableBalance', 0)),
            withdraw_available=float(data.get('withdrawAvailable', 0)),
            account_alias=data.get('accountAlias', ''),
            update_time=data.get('updateTime')
        )


@dataclass
class CoinMTrade:
    """Data model for COIN-M account trade information."""

    trade_id: str
    symbol: str
    pair: str
    order_id: str
    side: str
    price: float
    quantity: float
    base_qty: float
    realized_pnl: float
    commission: float
    commission_asset: str
    margin_asset: str
    time: int
    buyer: bool
    maker: bool
    position_side: str = "BOTH"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'id': self.trade_id,
            'symbol': self.symbol,
            'pair': self.pair,
            'orderId': self.order_id,
            'side': self.side,
            'price': self.price,
            'qty': self.quantity,
            'baseQty': self.base_qty,
            'realizedPnl': self.realized_pnl,
            'commission': self.commission,
            'commissionAsset': self.commission_asset,
            'marginAsset': self.margin_asset,
            'time': self.time,
            'buyer': self.buyer,
            'maker': self.maker,
            'positionSide': self.position_side
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CoinMTrade':
        """Create from dictionary representation."""
        return cls(
            trade_id=str(data.get('id', '')),
            symbol=data.get('symbol', ''),
            pair=data.get('pair', ''),
            order_id=str(data.get('orderId', '')),
            side=data.get('side', ''),
            price=float(data.get('price', 0)),
            quantity=float(data.get('qty', 0)),
            base_qty=float(data.get('baseQty', 0)),
            realized_pnl=float(data.get('realizedPnl', 0)),
            commission=float(data.get('commission', 0)),
            commission_asset=data.get('commissionAsset', ''),
            margin_asset=data.get('marginAsset', ''),
            time=int(data.get('time', 0)),
            buyer=data.get('buyer', False),
            maker=data.get('maker', False),
            position_side=data.get('positionSide', 'BOTH')
        )


@dataclass
class CoinMIncome:
    """Data model for COIN-M income history."""

    symbol: str
    income_type: str
    income: float
    asset: str
    time: int
    info: str
    trade_id: Optional[str] = None
    tran_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'symbol': self.symbol,
            'incomeType': self.income_type,
            'income': self.income,
            'asset': self.asset,
            'time': self.time,
            'info': self.info,
            'tradeId': self.trade_id,
            'tranId': self.tran_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CoinMIncome':
        """Create from dictionary representation."""
        tran_id = data.get('tranId')
        return cls(
            symbol=data.get('symbol', ''),
            income_type=data.get('incomeType', ''),
            income=float(data.get('income', 0)),
            asset=data.get('asset', ''),
            time=int(data.get('time', 0)),
            info=data.get('info', ''),
            trade_id=str(data['tradeId']) if data.get('tradeId') else None,
            tran_id=str(tran_id) if tran_id is not None else None
        )
