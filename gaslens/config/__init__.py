from gaslens.config.config_manager import (
    ConfigManager,
    Config,
    EstimatorConfig,
    APIConfig,
    LoggingConfig,
    NetworkPreset,
    NETWORK_PRESETS,
)

__all__ = [
    'ConfigManager',
    'Config',
    'EstimatorConfig',
    'APIConfig',
    'LoggingConfig',
    'NetworkPreset',
    'NETWORK_PRESETS'
]
