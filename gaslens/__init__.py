__version__ = "1.0.0"

from gaslens.models.fee_models import PriceEstimate, PriceSample, ClassifiedSampleSet
from gaslens.fees.fee_estimator import FeeEstimator, estimate_gas_prices
from gaslens.interfaces.blockchain import ChainDataSource, JsonRpcChainSource
from gaslens.config.config_manager import ConfigManager, NETWORK_PRESETS
from gaslens.core.exceptions import (
    GasLensError,
    UnknownNetworkError,
    SourceUnavailableError,
    MalformedDataError,
    EstimationError,
)

__all__ = [
    'PriceEstimate',
    'PriceSample',
    'ClassifiedSampleSet',
    'FeeEstimator',
    'estimate_gas_prices',
    'ChainDataSource',
    'JsonRpcChainSource',
    'ConfigManager',
    'NETWORK_PRESETS',
    'GasLensError',
    'UnknownNetworkError',
    'SourceUnavailableError',
    'MalformedDataError',
    'EstimationError'
]
