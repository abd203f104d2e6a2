"""Tests for the configuration system."""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import pytest

from daily_gm.config.settings import (
    AggregatorConfig,
    AggregatorMode,
    AppConfig,
    CacheConfig,
    CacheEngine,
    ChainConfig,
    ScanConfig,
    ServerConfig,
    WalletConfig,
    _load_yaml,
    chain_name,
)

if TYPE_CHECKING:
    from pathlib import Path

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    """Verify all default values are correct."""

    def test_server_defaults(self) -> None:
        cfg = ServerConfig()
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 3000

    def test_chain_defaults(self) -> None:
        cfg = ChainConfig()
        assert cfg.chain_id == 84532
        assert cfg.name == "Base Sepolia"
        assert cfg.deployment_block == 18_000_000
        assert cfg.effective_rpc_url == "https://sepolia.base.org"

    def test_scan_defaults(self) -> None:
        cfg = ScanConfig()
        assert cfg.max_window == 100_000
        assert cfg.window_delay == 0.1

    def test_aggregator_defaults(self) -> None:
        cfg = AggregatorConfig()
        assert cfg.mode == AggregatorMode.HTTP
        assert cfg.url == "http://127.0.0.1:3000"

    def test_cache_defaults(self) -> None:
        cfg = CacheConfig()
        assert cfg.engine == CacheEngine.FILE
        assert cfg.profile == "default"

    def test_wallet_defaults(self) -> None:
        cfg = WalletConfig()
        assert cfg.private_key == ""
        assert cfg.settle_delay == 1.0

    def test_app_config_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.debug is False
        assert cfg.reference.chain_id == 1
        assert cfg.metrics.enabled is True


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_cache_engine_redis(self) -> None:
        cfg = CacheConfig(engine="redis")
        assert cfg.engine == CacheEngine.REDIS

    def test_cache_engine_invalid(self) -> None:
        with pytest.raises(ValueError):  # noqa: PT011
            CacheConfig(engine="memcached")

    def test_max_window_must_be_positive(self) -> None:
        with pytest.raises(ValueError):  # noqa: PT011
            ScanConfig(max_window=0)

    def test_chain_name_fallback(self) -> None:
        assert chain_name(8453) == "Base"
        assert chain_name(10) == "Chain 10"

    def test_custom_rpc_wins(self) -> None:
        cfg = ChainConfig(chain_id=8453, rpc_url="https://base.example.com")
        assert cfg.effective_rpc_url == "https://base.example.com"


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


class TestEnvOverrides:
    def test_top_level_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DAILYGM_DEBUG", "true")
        assert AppConfig().debug is True

    def test_nested_env_via_delimiter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DAILYGM_SERVER__PORT", "8080")
        assert AppConfig().server.port == 8080

    def test_nested_chain_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DAILYGM_CHAIN__CHAIN_ID", "8453")
        monkeypatch.setenv("DAILYGM_CHAIN__CONTRACT_ADDRESS", "0xabc")
        cfg = AppConfig()
        assert cfg.chain.chain_id == 8453
        assert cfg.chain.contract_address == "0xabc"


# ---------------------------------------------------------------------------
# YAML
# ---------------------------------------------------------------------------


class TestYAML:
    def test_load_yaml_nonexistent(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_load_yaml_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert _load_yaml(path) == {}

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            textwrap.dedent(
                """\
                debug: true
                chain:
                  chain_id: 8453
                  contract_address: "0x1111111111111111111111111111111111111111"
                scan:
                  max_window: 5000
                """
            )
        )
        cfg = AppConfig.from_yaml(path)
        assert cfg.debug is True
        assert cfg.chain.chain_id == 8453
        assert cfg.chain.name == "Base"
        assert cfg.scan.max_window == 5000

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  port: 4000\n  host: 0.0.0.0\n")
        monkeypatch.setenv("DAILYGM_SERVER__PORT", "5000")
        cfg = AppConfig.from_yaml(path)
        assert cfg.server.port == 5000
        assert cfg.server.host == "0.0.0.0"  # noqa: S104


# ---------------------------------------------------------------------------
# Wallet networks
# ---------------------------------------------------------------------------


class TestWalletRpcUrls:
    def test_target_and_reference_always_present(self) -> None:
        cfg = AppConfig()
        urls = cfg.wallet_rpc_urls()
        assert urls[84532] == "https://sepolia.base.org"
        assert urls[1] == cfg.reference.rpc_url

    def test_extra_networks(self) -> None:
        cfg = AppConfig(wallet=WalletConfig(rpc_urls={8453: "https://base.example.com"}))
        assert cfg.wallet_rpc_urls()[8453] == "https://base.example.com"
