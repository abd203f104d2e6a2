"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``DAILYGM_``, nested via ``__``)
2. YAML config file (``--config path`` or ``DAILYGM_CONFIG_PATH`` env var)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Known networks
# ---------------------------------------------------------------------------

ETHEREUM_MAINNET = 1
BASE_MAINNET = 8453
BASE_SEPOLIA = 84532

CHAIN_NAMES: dict[int, str] = {
    ETHEREUM_MAINNET: "Ethereum",
    BASE_MAINNET: "Base",
    BASE_SEPOLIA: "Base Sepolia",
}

DEFAULT_RPC_URLS: dict[int, str] = {
    ETHEREUM_MAINNET: "https://eth.llamarpc.com",
    BASE_MAINNET: "https://mainnet.base.org",
    BASE_SEPOLIA: "https://sepolia.base.org",
}


def chain_name(chain_id: int) -> str:
    """Human-readable name for a chain id (falls back to ``Chain <id>``)."""
    return CHAIN_NAMES.get(chain_id, f"Chain {chain_id}")


# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class CacheEngine(enum.StrEnum):
    """Supported progress-cache backends."""

    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"


class AggregatorMode(enum.StrEnum):
    """Where the fast received-count comes from."""

    HTTP = "http"
    RPC = "rpc"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_SERVER__",
        case_sensitive=False,
    )

    host: str = "127.0.0.1"
    port: int = 3000


class ChainConfig(BaseSettings):
    """Target network and GM contract settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_CHAIN__",
        case_sensitive=False,
    )

    chain_id: int = Field(
        default=BASE_SEPOLIA,
        description="Target chain: 8453 (Base) or 84532 (Base Sepolia)",
    )
    rpc_url: str = ""
    contract_address: str = ""
    deployment_block: int = 18_000_000

    @property
    def name(self) -> str:
        return chain_name(self.chain_id)

    @property
    def effective_rpc_url(self) -> str:
        return self.rpc_url or DEFAULT_RPC_URLS.get(self.chain_id, "")


class ReferenceNetworkConfig(BaseSettings):
    """Network that hosts the ENS registry used for name lookups."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_REFERENCE__",
        case_sensitive=False,
    )

    chain_id: int = ETHEREUM_MAINNET
    rpc_url: str = DEFAULT_RPC_URLS[ETHEREUM_MAINNET]


class AggregatorConfig(BaseSettings):
    """Fast received-count aggregator settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_AGGREGATOR__",
        case_sensitive=False,
    )

    mode: AggregatorMode = Field(
        default=AggregatorMode.HTTP,
        description="http: query a fetch-gms endpoint; rpc: one full-range getLogs",
    )
    url: str = "http://127.0.0.1:3000"
    rpc_url: str = Field(
        default="",
        description="Indexer-grade RPC (e.g. Alchemy) allowing unbounded getLogs ranges",
    )
    timeout: float = 15.0


class ScanConfig(BaseSettings):
    """Chunked log scanner settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_SCAN__",
        case_sensitive=False,
    )

    max_window: int = Field(default=100_000, gt=0)
    window_delay: float = Field(default=0.1, ge=0)
    stale_after_seconds: int = 24 * 60 * 60


class CacheConfig(BaseSettings):
    """Progress cache settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_CACHE__",
        case_sensitive=False,
    )

    engine: CacheEngine = Field(
        default=CacheEngine.FILE,
        description="Cache backend: memory, file or redis",
    )
    url: str = "redis://localhost:6379/0"
    max_connections: int = 10
    directory: str = "~/.daily_gm"
    profile: str = "default"


class WalletConfig(BaseSettings):
    """Local signing wallet settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_WALLET__",
        case_sensitive=False,
    )

    private_key: str = ""
    initial_chain_id: int | None = None
    rpc_urls: dict[int, str] = Field(default_factory=dict)
    settle_delay: float = 1.0


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``DAILYGM_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="DAILYGM_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    reference: ReferenceNetworkConfig = Field(default_factory=ReferenceNetworkConfig)
    aggregator: AggregatorConfig = Field(default_factory=AggregatorConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    wallet: WalletConfig = Field(default_factory=WalletConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                merged = {**val, **values[key]}
                values[key] = merged
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    def wallet_rpc_urls(self) -> dict[int, str]:
        """Networks the local wallet can switch between, keyed by chain id.

        The target chain and the reference network are always present.
        """
        urls = {
            self.reference.chain_id: self.reference.rpc_url,
            self.chain.chain_id: self.chain.effective_rpc_url,
        }
        urls.update(self.wallet.rpc_urls)
        return {cid: url for cid, url in urls.items() if url}
