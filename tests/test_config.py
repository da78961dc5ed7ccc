"""
Tests for configuration loading.
"""

import json

import pytest
import toml
import yaml

from gaslens.config.config_manager import NETWORK_PRESETS, ConfigFormat, ConfigManager
from gaslens.core.exceptions import UnknownNetworkError


class TestDefaults:
    """Test default configuration."""

    def test_defaults(self):
        manager = ConfigManager(environ={})
        assert manager.get('estimator.blocks_to_analyze') == 20
        assert manager.get('api.port') == 8000
        assert manager.get('logging.level') == "INFO"
        assert manager.get('missing.key', 'fallback') == 'fallback'

    def test_presets(self):
        assert NETWORK_PRESETS['mainnet'].rpc_url == 'https://public-node.rsk.co'
        assert NETWORK_PRESETS['testnet'].rpc_url == 'https://public-node.testnet.rsk.co'
        assert NETWORK_PRESETS['mainnet'].chain_id == 30
        assert NETWORK_PRESETS['testnet'].chain_id == 31

    def test_unknown_network_rejected(self):
        manager = ConfigManager(environ={})
        with pytest.raises(UnknownNetworkError) as exc_info:
            manager.get_network_preset('devnet')
        assert exc_info.value.network == 'devnet'
        assert "Unsupported network: devnet" in str(exc_info.value)

    def test_network_names(self):
        assert ConfigManager(environ={}).network_names() == ['mainnet', 'testnet']

    def test_port_from_environment(self):
        manager = ConfigManager(environ={'PORT': '9100'})
        assert manager.config.api.port == 9100

    def test_section_keys(self):
        settings = ConfigManager(environ={}).get_all()
        assert set(settings['api']) == {'host', 'port', 'enable_cors', 'cors_origins'}
        assert set(settings['logging']) == {
            'level', 'file', 'max_size', 'backup_count', 'json_format', 'console_enabled'
        }

    def test_missing_file_keeps_defaults(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "absent.yaml"), environ={})
        assert manager.get('estimator.blocks_to_analyze') == 20


class TestFileLoading:
    """Test loading configuration files."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "gaslens.yaml"
        path.write_text(yaml.safe_dump({
            'estimator': {'blocks_to_analyze': 5, 'unknown': 1},
            'api': {'port': 8080, 'enable_cors': False},
            'networks': {'testnet': {'rpc_url': 'http://localhost:4444'}},
        }))

        manager = ConfigManager(str(path), environ={})

        assert manager.config_format == ConfigFormat.YAML
        assert manager.get('estimator.blocks_to_analyze') == 5
        assert manager.get('api.enable_cors') is False
        assert manager.get_network_preset('testnet').rpc_url == 'http://localhost:4444'
        assert manager.get_network_preset('testnet').chain_id == 31
        assert manager.get_network_preset('mainnet').rpc_url == 'https://public-node.rsk.co'

    def test_json_file(self, tmp_path):
        path = tmp_path / "gaslens.json"
        path.write_text(json.dumps({'logging': {'level': 'DEBUG', 'json_format': True}}))

        manager = ConfigManager(str(path), environ={})

        assert manager.config_format == ConfigFormat.JSON
        assert manager.get('logging.level') == 'DEBUG'
        assert manager.get('logging.json_format') is True

    def test_toml_file(self, tmp_path):
        path = tmp_path / "gaslens.toml"
        path.write_text(toml.dumps({'estimator': {'request_timeout': 10}}))

        manager = ConfigManager(str(path), environ={})

        assert manager.config_format == ConfigFormat.TOML
        assert manager.get('estimator.request_timeout') == 10

    def test_environment_beats_file(self, tmp_path):
        path = tmp_path / "gaslens.yaml"
        path.write_text(yaml.safe_dump({'api': {'port': 8080}}))
        manager = ConfigManager(str(path), environ={'PORT': '3000'})
        assert manager.get('api.port') == 3000

    def test_invalid_window_rejected(self, tmp_path):
        path = tmp_path / "gaslens.yaml"
        path.write_text(yaml.safe_dump({'estimator': {'blocks_to_analyze': 0}}))
        with pytest.raises(ValueError):
            ConfigManager(str(path), environ={})

    def test_unknown_network_override_ignored(self, tmp_path):
        path = tmp_path / "gaslens.yaml"
        path.write_text(yaml.safe_dump({'networks': {'devnet': {'rpc_url': 'http://x'}}}))
        manager = ConfigManager(str(path), environ={})
        assert manager.network_names() == ['mainnet', 'testnet']

    def test_get_all(self):
        data = ConfigManager(environ={}).get_all()
        assert set(data) == {'estimator', 'api', 'logging', 'networks'}
        assert data['networks']['mainnet']['chain_id'] == 30
