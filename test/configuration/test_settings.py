import os

from stablefetch.config import PUBLIC_HORIZON_URL, TESTNET_HORIZON_URL, Settings


def test_env_file_does_not_leak_into_environ(tmp_path, monkeypatch):
    monkeypatch.delenv("STABLEFETCH_IS_PROD", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("STABLEFETCH_IS_PROD=true\n")

    assert Settings().is_prod
    assert "STABLEFETCH_IS_PROD" not in os.environ


def test_resolved_horizon_url():
    assert Settings(is_prod=True).resolved_horizon_url == PUBLIC_HORIZON_URL
    assert Settings(is_prod=False).resolved_horizon_url == TESTNET_HORIZON_URL
    custom = Settings(horizon_url="https://horizon.test/")
    assert custom.resolved_horizon_url == "https://horizon.test"
