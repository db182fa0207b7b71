from hypothesis import given
from hypothesis.strategies import integers, fixed_dictionaries

from stablefetch.portfolio import BALANCE_FIELDS, Balances


@given(
    total=integers(0, 10**12),
    chain_balances=fixed_dictionaries({f: integers(0, 10**30) for f in BALANCE_FIELDS}),
)
def test_balances_to_from_dict(total, chain_balances):
    balances = Balances(total, **chain_balances)
    assert Balances.from_dict(balances.to_dict()) == balances


def test_total_only():
    assert Balances(total_balance=0).to_dict() == {"totalBalance": 0}


def test_camel_case_keys():
    keys = list(Balances(1, polygon_balance=2).to_dict().keys())
    assert keys == [
        "totalBalance",
        "polygonBalance",
        "ethereumBalance",
        "celoBalance",
        "optimismBalance",
        "arbitrumBalance",
        "baseBalance",
        "stellarBalance",
    ]
