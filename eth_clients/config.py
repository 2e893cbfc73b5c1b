"""Configuration for the harness."""

import os
from dataclasses import dataclass


@dataclass
class ClientConfig:
    """Harness-side settings shared by every BeaconClient."""

    # Maximum seconds to wait on a single Beacon API request
    rpc_timeout: float = 5.0
    # Interval between attempts while resolving spec and genesis at init
    init_poll_interval: float = 1.0
    preset: str = "mainnet"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Read ETH_CLIENTS_* environment variables over the defaults."""
        config = cls()
        if "ETH_CLIENTS_RPC_TIMEOUT" in os.environ:
            config.rpc_timeout = float(os.environ["ETH_CLIENTS_RPC_TIMEOUT"])
        if "ETH_CLIENTS_INIT_POLL_INTERVAL" in os.environ:
            config.init_poll_interval = float(os.environ["ETH_CLIENTS_INIT_POLL_INTERVAL"])
        config.preset = os.environ.get("ETH_CLIENTS_PRESET", config.preset)
        config.log_level = os.environ.get("ETH_CLIENTS_LOG_LEVEL", config.log_level)
        return config

    def apply(self) -> None:
        """Configure logging and the SSZ preset for this process.

        Call before eth_clients.spec.types is imported.
        """
        from .spec.constants import set_preset
        from .utils import setup_logging

        setup_logging(self.log_level)
        set_preset(self.preset)
