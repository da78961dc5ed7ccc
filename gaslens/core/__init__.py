from gaslens.core.exceptions import (
    GasLensError,
    UnknownNetworkError,
    SourceUnavailableError,
    MalformedDataError,
    EstimationError,
)

__all__ = [
    'GasLensError',
    'UnknownNetworkError',
    'SourceUnavailableError',
    'MalformedDataError',
    'EstimationError',
]
