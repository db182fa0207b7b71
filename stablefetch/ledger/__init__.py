"""
Module for the stablecoin balance on the Stellar ledger.

The main class of this module is :class:`LedgerService`. It reads the
current balance from Horizon and reconstructs historical balances by
replaying the account's payments.

Example:
    ::

        service = LedgerService.create()
        address = "GAJ4...WXYZ"

        await service.get_stellar_balance(address)
        # => current balance, 7 decimals

        await service.get_stellar_balance(address, datetime(2024, 1, 1))
        # => balance as of 2024-01-01

        txs = await service.get_stellar_txs(address, datetime(2024, 1, 1))
        # => decoded transactions since 2024-01-01, newest first
"""

from stablefetch.ledger.client import PAGE_LIMIT, HorizonClient
from stablefetch.ledger.service import LedgerService, to_stroops
from stablefetch.ledger.transaction import (
    LedgerPayment,
    LedgerTransaction,
    network_passphrase,
    parse_created_at,
)
