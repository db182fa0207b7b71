from datetime import datetime, timezone
from decimal import Decimal

from stellar_sdk import Network

from fixtures.horizon import OTHER, WALLET, payment_envelope, record
from stablefetch.ledger import (
    LedgerPayment,
    LedgerTransaction,
    network_passphrase,
    parse_created_at,
)


def test_network_passphrase():
    assert network_passphrase(True) == Network.PUBLIC_NETWORK_PASSPHRASE
    assert network_passphrase(False) == Network.TESTNET_NETWORK_PASSPHRASE


def test_parse_created_at():
    assert parse_created_at("2024-01-02T10:00:00Z") == datetime(
        2024, 1, 2, 10, tzinfo=timezone.utc
    )


def test_from_record():
    created_at = datetime(2024, 1, 2, 10, tzinfo=timezone.utc)
    rec = record(created_at, payment_envelope(OTHER, WALLET, "12.3456789"), hash="abc")
    tx = LedgerTransaction.from_record(rec, network_passphrase(True))

    assert tx.hash == "abc"
    assert tx.created_at == created_at
    assert tx.payments == [
        LedgerPayment("USDGLO", OTHER, WALLET, Decimal("12.3456789"))
    ]
