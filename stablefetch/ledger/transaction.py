from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from stellar_sdk import FeeBumpTransactionEnvelope, Network, Payment
from stellar_sdk.helpers import parse_transaction_envelope_from_xdr

from stablefetch.utils import as_utc


def network_passphrase(is_prod: bool) -> str:
    """
    Stellar network passphrase used to decode envelopes
    """
    if is_prod:
        return Network.PUBLIC_NETWORK_PASSPHRASE
    return Network.TESTNET_NETWORK_PASSPHRASE


def parse_created_at(value: str) -> datetime:
    """
    Parse Horizon's ``created_at`` (``2024-01-02T10:00:00Z``)
    """
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


class LedgerPayment:
    """
    A ``payment`` operation decoded from a transaction envelope.
    """

    #: Asset code (``XLM`` for the native asset)
    code: str
    #: Paying account (operation source or transaction source)
    source: str
    #: Receiving account
    destination: str
    #: Amount in whole units, exact
    amount: Decimal

    def __init__(self, code: str, source: str, destination: str, amount: Decimal):
        self.code = code
        self.source = source
        self.destination = destination
        self.amount = amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "source": self.source,
            "destination": self.destination,
            "amount": str(self.amount),
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"LedgerPayment({json.dumps(self.to_dict())})"


class LedgerTransaction:
    """
    A Horizon transaction record with its decoded payments.

    Only ``payment`` operations are kept, other operation types don't
    move balances of the tracked asset in this model.
    """

    #: Transaction hash
    hash: str
    #: Ledger close time
    created_at: datetime
    payments: List[LedgerPayment]

    def __init__(self, hash: str, created_at: datetime, payments: List[LedgerPayment]):
        self.hash = hash
        self.created_at = created_at
        self.payments = payments

    @staticmethod
    def from_record(record: Dict[str, Any], passphrase: str) -> LedgerTransaction:
        """
        Decode a Horizon transaction record.

        Args:
            record: item of ``_embedded.records``
            passphrase: network passphrase, see :func:`network_passphrase`
        """
        envelope = parse_transaction_envelope_from_xdr(
            record["envelope_xdr"], passphrase
        )
        if isinstance(envelope, FeeBumpTransactionEnvelope):
            envelope = envelope.transaction.inner_transaction_envelope
        tx = envelope.transaction
        tx_source = tx.source.account_id

        payments = []
        for op in tx.operations:
            if not isinstance(op, Payment):
                continue
            source = op.source.account_id if op.source is not None else tx_source
            payments.append(
                LedgerPayment(
                    code=op.asset.code,
                    source=source,
                    destination=op.destination.account_id,
                    amount=Decimal(str(op.amount)),
                )
            )
        return LedgerTransaction(
            hash=record.get("hash", ""),
            created_at=parse_created_at(record["created_at"]),
            payments=payments,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "createdAt": self.created_at.isoformat(),
            "payments": [p.to_dict() for p in self.payments],
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"LedgerTransaction({json.dumps(self.to_dict())})"
