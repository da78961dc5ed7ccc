# gaslens/models/__init__.py
from gaslens.models.fee_models import (
    ChainTransaction,
    ChainBlock,
    PriceSample,
    ClassifiedSampleSet,
    CongestionBand,
    PriceEstimate,
    EstimationReport,
)

__all__ = [
    'ChainTransaction',
    'ChainBlock',
    'PriceSample',
    'ClassifiedSampleSet',
    'CongestionBand',
    'PriceEstimate',
    'EstimationReport'
]
