"""
stablefetch fetches stablecoin balances from EVM chains and the
Stellar ledger and caches them for subsequent queries.

Every balance query goes through one of these services:

+----------------------------------------------------+---------------------------+
| Service                                            | Description               |
+====================================================+===========================+
| :class:`stablefetch.portfolio.PortfolioService`    | Total holdings of an      |
|                                                    | address over all chains   |
+----------------------------------------------------+---------------------------+
| :class:`stablefetch.balances.BalancesService`      | Balance on one EVM chain  |
+----------------------------------------------------+---------------------------+
| :class:`stablefetch.blocks.BlocksService`          | Block number by date      |
+----------------------------------------------------+---------------------------+
| :class:`stablefetch.ledger.LedgerService`          | Stellar balance and       |
|                                                    | transaction history       |
+----------------------------------------------------+---------------------------+
| :class:`stablefetch.kv.CacheService`               | Hash-field TTL cache      |
+----------------------------------------------------+---------------------------+

:func:`stablefetch.average.get_average_balance` turns a balance and
a transfer history into a time-weighted average.
"""

from stablefetch.average import TokenTransfer, get_average_balance
from stablefetch.config import Settings, get_settings
from stablefetch.logging import setup_logging
from stablefetch.portfolio import Balances, PortfolioService, get_balances
