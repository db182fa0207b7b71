"""
Utility functions.
"""

from datetime import datetime, timezone


def short_address(address: str) -> str:
    """
    Converts an address to short version (for display purposes only).

    Args:
        address: Ethereum or Stellar address to shorten

    Returns:
        Short version of the address.

    Examples:
        ::

            print(short_address("0x6B175474E89094C44Da98b954EedeAC495271d0F"))
            # 0x6B17...1d0F

    """
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def is_evm_address(address: str) -> bool:
    """
    ``True`` if the address selects the EVM fetch path.

    Any string with ``0x`` in its first four characters is treated as an
    EVM address, everything else (including malformed input) goes to the
    Stellar ledger path.
    """
    return "0x" in address[:4]


def as_utc(date: datetime) -> datetime:
    """
    Timezone-aware UTC version of ``date``. Naive datetimes are treated as UTC.
    """
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_date(date: datetime | None) -> str:
    """
    UTC calendar date of ``date`` as ``YYYY-MM-DD``; empty string for ``None``.
    """
    if date is None:
        return ""
    return as_utc(date).strftime("%Y-%m-%d")


def to_millis(date: datetime) -> int:
    """
    Unix time of ``date`` in integer milliseconds
    """
    delta = as_utc(date) - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def to_human(amount: int, decimals: int) -> int:
    """
    Convert an amount in smallest units into whole tokens (truncating).

    Examples:
        ::

            to_human(10**18, 18)
            # 1
    """
    return amount // 10**decimals
