from datetime import datetime, timedelta, timezone

import pytest

from fixtures.general import Clock
from fixtures.rpc import RpcMock
from stablefetch.blocks import BLOCK_NUMBER_TTL, BlocksService, block_number_cache_key
from stablefetch.chains import ChainKey, chain_for
from stablefetch.kv import CacheService

POLYGON = chain_for(ChainKey.POLYGON, is_prod=True)
CELO = chain_for(ChainKey.CELO, is_prod=True)
DATE = datetime(2024, 1, 2, 15, 30, tzinfo=timezone.utc)


def test_block_number_cache_key():
    assert block_number_cache_key(DATE) == "blocknumber-2024-01-02"
    # UTC date, not the local one
    tz = timezone(timedelta(hours=-10))
    assert block_number_cache_key(datetime(2024, 1, 2, 20, tzinfo=tz)) == (
        "blocknumber-2024-01-03"
    )


async def test_get_chain_block_number_cached(
    blocks_service: BlocksService, rpc_mock: RpcMock, cache: CacheService
):
    number = await blocks_service.get_chain_block_number(DATE, POLYGON)
    assert number == rpc_mock.get_block_number_at_or_before_date(DATE, POLYGON.id)
    rpc_mock.number_of_block_resolutions = 0

    assert await blocks_service.get_chain_block_number(DATE, POLYGON) == number
    assert rpc_mock.number_of_block_resolutions == 0
    assert cache.get_int("blocknumber-2024-01-02", "polygon") == number


async def test_cache_field_per_chain(blocks_service: BlocksService, rpc_mock: RpcMock):
    await blocks_service.get_chain_block_number(DATE, POLYGON)
    await blocks_service.get_chain_block_number(DATE, CELO)
    assert rpc_mock.number_of_block_resolutions == 2


async def test_block_number_ttl(
    blocks_service: BlocksService, rpc_mock: RpcMock, clock: Clock
):
    await blocks_service.get_chain_block_number(DATE, POLYGON)
    clock.advance(BLOCK_NUMBER_TTL - 1)
    await blocks_service.get_chain_block_number(DATE, POLYGON)
    assert rpc_mock.number_of_block_resolutions == 1
    clock.advance(1)
    await blocks_service.get_chain_block_number(DATE, POLYGON)
    assert rpc_mock.number_of_block_resolutions == 2


async def test_rpc_error_propagates(cache: CacheService, core_kwargs):
    service = BlocksService(cache, RpcMock(failing_chains=[POLYGON.id]), **core_kwargs)
    with pytest.raises(ConnectionError):
        await service.get_chain_block_number(DATE, POLYGON)
    assert cache.hget("blocknumber-2024-01-02", "polygon") is None
