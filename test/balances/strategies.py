from string import ascii_letters
from hypothesis.strategies import SearchStrategy, builds, integers, sampled_from, text
from stablefetch.balances.balance import ChainBalance


def chain_balance() -> SearchStrategy[ChainBalance]:
    return builds(
        ChainBalance,
        sampled_from(["polygon", "ethereum", "celo", "base", "stellar"]),
        text(ascii_letters),
        sampled_from(["", "2024-01-01", "2023-12-31"]),
        integers(0, 10**30),
    )
