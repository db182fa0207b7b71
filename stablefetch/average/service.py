from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable

from stablefetch.average.transfer import TokenTransfer
from stablefetch.utils import to_millis


def _div_trunc(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def get_average_balance(
    wallet_address: str,
    start_date: datetime,
    end_date: datetime,
    end_balance: int,
    transactions: Iterable[TokenTransfer | Dict[str, Any]],
) -> int:
    """
    Time-weighted average balance over ``[start_date, end_date]``.

    The walk starts at ``end_date`` with ``end_balance`` and goes back in
    time. Every transaction closes a segment: the current balance is
    weighted by the milliseconds since the previous cursor, then the
    transaction is reverted (a transfer sent by the wallet is added back,
    a received one is taken out). The last segment runs back to
    ``start_date``.

    Args:
        wallet_address: tracked address (compared case-insensitively)
        start_date: beginning of the interval
        end_date: end of the interval
        end_balance: balance at ``end_date`` in smallest units
        transactions: transfers within the interval, **newest first**

    Returns:
        Average balance in smallest units, truncated

    Raises:
        ValueError: if ``end_date`` is not after ``start_date``

    Examples:
        ::

            get_average_balance(
                "0xabc",
                datetime(2024, 1, 1),
                datetime(2024, 1, 3),
                100,
                [{"from": "0xabc", "value": "40", "timeStamp": "1704153600"}],
            )
            # => 120
    """
    start_ms = to_millis(start_date)
    end_ms = to_millis(end_date)
    interval_ms = end_ms - start_ms
    if interval_ms <= 0:
        raise ValueError("end_date must be after start_date")

    wallet_address = wallet_address.lower()
    total_balance = 0
    current_ms = end_ms
    current_balance = end_balance

    for item in transactions:
        transfer = item if isinstance(item, TokenTransfer) else TokenTransfer.from_dict(item)
        total_balance += current_balance * (current_ms - transfer.millis)
        current_ms = transfer.millis
        if transfer.from_address == wallet_address:
            current_balance += transfer.value
        else:
            current_balance -= transfer.value

    total_balance += current_balance * (current_ms - start_ms)
    return _div_trunc(total_balance, interval_ms)
