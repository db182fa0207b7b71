"""
Time-weighted average balance over a transfer history.

Example:
    ::

        from stablefetch.average import get_average_balance

        average = get_average_balance(
            wallet_address, month_start, month_end, end_balance, transfers
        )
"""

from stablefetch.average.service import get_average_balance
from stablefetch.average.transfer import TokenTransfer
