# gaslens/fees/__init__.py
from gaslens.fees.fee_estimator import FeeEstimator, estimate_gas_prices, extract_samples
from gaslens.fees.fee_strategies import (
    CongestionAwareStrategy,
    BaseFeeFallbackStrategy,
    calculate_congestion_ratio,
    select_congestion_band,
    derive_tier_indices,
)

__all__ = [
    'FeeEstimator',
    'estimate_gas_prices',
    'extract_samples',
    'CongestionAwareStrategy',
    'BaseFeeFallbackStrategy',
    'calculate_congestion_ratio',
    'select_congestion_band',
    'derive_tier_indices'
]
