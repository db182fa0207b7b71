"""
Module aggregating stablecoin holdings across all supported chains.

Example:
    ::

        from stablefetch.portfolio import get_balances

        balances = await get_balances("0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045")
        balances.to_dict()
        # => {"totalBalance": 1250, "polygonBalance": 1000000000000000000000, ...}

    A long-lived service keeps its http clients open until closed::

        async with PortfolioService.create() as service:
            for address in addresses:
                print((await service.get_balances(address)).total_balance)
"""

from stablefetch.portfolio.balances import BALANCE_FIELDS, Balances
from stablefetch.portfolio.service import PortfolioService, get_balances
