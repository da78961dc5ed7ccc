# gaslens/config/config_manager.py - Configuration management

import json
import logging
import os
from dataclasses import dataclass, asdict, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
import yaml

from gaslens.core.exceptions import UnknownNetworkError

logger = logging.getLogger("gaslens.config")


class ConfigFormat(Enum):
    YAML = "yaml"
    JSON = "json"
    TOML = "toml"


@dataclass(frozen=True)
class NetworkPreset:
    """Static description of a chain the service can sample"""
    name: str
    rpc_url: str
    chain_id: int
    currency: str = "RBTC"


NETWORK_PRESETS: Dict[str, NetworkPreset] = {
    'mainnet': NetworkPreset(
        name='mainnet',
        rpc_url='https://public-node.rsk.co',
        chain_id=30
    ),
    'testnet': NetworkPreset(
        name='testnet',
        rpc_url='https://public-node.testnet.rsk.co',
        chain_id=31,
        currency='tRBTC'
    )
}


@dataclass
class EstimatorConfig:
    blocks_to_analyze: int = 20
    request_timeout: int = 30

    def __post_init__(self):
        if self.blocks_to_analyze < 1:
            raise ValueError(f"blocks_to_analyze must be at least 1, got {self.blocks_to_analyze}")


@dataclass
class APIConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    enable_cors: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None
    max_size: int = 10485760  # 10MB
    backup_count: int = 5
    json_format: bool = False
    console_enabled: bool = True


@dataclass
class Config:
    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    networks: Dict[str, NetworkPreset] = field(default_factory=lambda: dict(NETWORK_PRESETS))


class ConfigManager:
    SECTIONS = ['estimator', 'api', 'logging']

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self.config_path = config_path
        self.environ = os.environ if environ is None else environ
        self.config = Config()
        self.config_format = ConfigFormat.YAML

        self._load_config()
        self._apply_env_overrides()

    def _load_config(self):
        """Load configuration from file, keeping defaults when there is none"""
        if not self.config_path:
            return

        config_file = Path(self.config_path)
        if not config_file.exists():
            logger.debug(f"Config file {config_file} not found, using defaults")
            return

        suffix = config_file.suffix.lower()
        if suffix == '.json':
            self.config_format = ConfigFormat.JSON
        elif suffix == '.toml':
            self.config_format = ConfigFormat.TOML
        else:
            self.config_format = ConfigFormat.YAML

        with open(config_file, 'r') as f:
            if self.config_format == ConfigFormat.JSON:
                config_data = json.load(f)
            elif self.config_format == ConfigFormat.TOML:
                config_data = toml.load(f)
            else:
                config_data = yaml.safe_load(f)

        self._update_config_from_dict(config_data or {})
        logger.info(f"Loaded configuration from {config_file}")

    def _update_config_from_dict(self, config_data: Dict[str, Any]):
        for section in self.SECTIONS:
            if section in config_data:
                section_config = getattr(self.config, section)
                for key, value in (config_data[section] or {}).items():
                    if hasattr(section_config, key):
                        setattr(section_config, key, value)

        # Re-run validation after overrides
        self.config.estimator.__post_init__()

        for name, overrides in (config_data.get('networks') or {}).items():
            if name not in self.config.networks:
                logger.warning(f"Ignoring overrides for unknown network: {name}")
                continue
            preset = self.config.networks[name]
            self.config.networks[name] = NetworkPreset(
                name=name,
                rpc_url=overrides.get('rpc_url', preset.rpc_url),
                chain_id=int(overrides.get('chain_id', preset.chain_id)),
                currency=overrides.get('currency', preset.currency)
            )

    def _apply_env_overrides(self):
        port = self.environ.get('PORT')
        if port:
            self.config.api.port = int(port)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        obj = self.config
        for part in key.split('.'):
            if isinstance(obj, dict):
                if part not in obj:
                    return default
                obj = obj[part]
            elif hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default
        return obj

    def get_network_preset(self, network: str) -> NetworkPreset:
        preset = self.config.networks.get(network)
        if preset is None:
            raise UnknownNetworkError(network)
        return preset

    def network_names(self) -> List[str]:
        return list(self.config.networks.keys())

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration as dictionary"""
        return {
            'estimator': asdict(self.config.estimator),
            'api': asdict(self.config.api),
            'logging': asdict(self.config.logging),
            'networks': {name: asdict(p) for name, p in self.config.networks.items()}
        }
