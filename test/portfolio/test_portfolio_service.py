from datetime import datetime, timezone

from fixtures.general import ADDRESS
from fixtures.horizon import WALLET, HorizonMock
from fixtures.rpc import RpcMock
from stablefetch.chains import PROD_CHAINS, ChainKey
from stablefetch.config import Settings
from stablefetch.ledger import LedgerService
from stablefetch.portfolio import Balances, PortfolioService, get_balances
from stablefetch.utils import is_evm_address

STELLAR_BALANCE = [
    {"asset_type": "credit_alphanum12", "asset_code": "USDGLO", "balance": "12.5000000"}
]


def test_is_evm_address():
    assert is_evm_address(ADDRESS)
    assert is_evm_address("0X" + ADDRESS[2:]) is False
    assert not is_evm_address(WALLET)
    assert not is_evm_address("")
    assert not is_evm_address("not an address")


async def test_evm_total(portfolio_service: PortfolioService, rpc_mock: RpcMock):
    balances = await portfolio_service.get_balances(ADDRESS)
    assert balances.total_balance == 3
    assert balances.polygon_balance == 10**18
    assert balances.base_balance == 2 * 10**18
    assert balances.celo_balance == 0
    assert balances.stellar_balance == 0
    assert rpc_mock.number_of_balances == 6


async def test_evm_total_sums_all_six_chains(
    portfolio_service: PortfolioService, rpc_mock: RpcMock
):
    rpc_mock.balances = {chain.id: 10**18 for chain in PROD_CHAINS.values()}
    balances = await portfolio_service.get_balances(ADDRESS)
    assert balances.total_balance == 6


async def test_evm_decimals_truncate(portfolio_service: PortfolioService, rpc_mock: RpcMock):
    rpc_mock.balances = {137: 10**18 - 1}
    assert (await portfolio_service.get_balances(ADDRESS)).total_balance == 0
    rpc_mock.balances = {137: 10**18}
    balances = await portfolio_service.get_balances(ADDRESS[:-1] + "0")
    assert balances.total_balance == 1


async def test_evm_path_never_hits_ledger(
    portfolio_service: PortfolioService, horizon_mock: HorizonMock
):
    await portfolio_service.get_balances(ADDRESS)
    assert horizon_mock.number_of_requests == 0


async def test_stellar_path_never_hits_rpc(
    portfolio_service: PortfolioService,
    rpc_mock: RpcMock,
    horizon_mock: HorizonMock,
):
    horizon_mock.accounts[WALLET] = STELLAR_BALANCE
    balances = await portfolio_service.get_balances(WALLET)
    assert balances.total_balance == 12
    assert balances.stellar_balance == 125_000_000
    assert balances.polygon_balance == 0
    assert rpc_mock.number_of_balances == 0


async def test_malformed_address_takes_ledger_path(
    portfolio_service: PortfolioService,
    rpc_mock: RpcMock,
    horizon_mock: HorizonMock,
):
    balances = await portfolio_service.get_balances("definitely-not-an-address")
    assert balances.total_balance == 0
    assert rpc_mock.number_of_balances == 0
    assert horizon_mock.number_of_requests == 1


async def test_failing_chain_degrades_to_zero(portfolio_service: PortfolioService, rpc_mock: RpcMock):
    rpc_mock.failing_chains = {137}
    balances = await portfolio_service.get_balances(ADDRESS)
    assert balances.polygon_balance == 0
    assert balances.total_balance == 2


async def test_historical_balances(portfolio_service: PortfolioService, rpc_mock: RpcMock):
    on_date = datetime(2024, 1, 2, tzinfo=timezone.utc)
    balances = await portfolio_service.get_balances(ADDRESS, on_date)
    assert balances.total_balance >= 3
    assert rpc_mock.number_of_block_resolutions == len(ChainKey)


async def test_non_production_short_circuits(
    dev_settings: Settings,
    balances_service,
    ledger_service: LedgerService,
    rpc_mock: RpcMock,
    horizon_mock: HorizonMock,
):
    service = PortfolioService(balances_service, ledger_service, settings=dev_settings)
    for address in [ADDRESS, WALLET]:
        balances = await service.get_balances(address)
        assert balances == Balances(total_balance=0)
        assert balances.to_dict() == {"totalBalance": 0}
    assert rpc_mock.number_of_balances == 0
    assert horizon_mock.number_of_requests == 0


async def test_get_balances_shortcut(dev_settings: Settings):
    balances = await get_balances(ADDRESS, settings=dev_settings)
    assert balances.to_dict() == {"totalBalance": 0}


async def test_service_context_closes_horizon_client(core_kwargs):
    async with PortfolioService.create(**core_kwargs) as service:
        client = service._ledger_service.horizon._client
        assert not client.is_closed
    assert client.is_closed


async def test_get_balances_shortcut_closes_service(dev_settings: Settings, monkeypatch):
    closed = []

    async def aclose(self):
        closed.append(self)

    monkeypatch.setattr(PortfolioService, "aclose", aclose)
    await get_balances(WALLET, settings=dev_settings)
    assert len(closed) == 1
