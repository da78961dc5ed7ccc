from typing import Optional


class GasLensError(Exception):
    """Base exception for gas price estimation errors"""
    pass


class UnknownNetworkError(GasLensError):
    """Requested network is not configured"""

    def __init__(self, network: str):
        self.network = network
        super().__init__(f"Unsupported network: {network}")


class SourceUnavailableError(GasLensError):
    """Chain data source could not be reached or returned an error"""
    pass


class MalformedDataError(SourceUnavailableError):
    """Chain data source returned data that violates the expected shape"""
    pass


class EstimationError(GasLensError):
    """An estimation pass failed; carries the network and stage it failed in"""

    def __init__(self, message: str, network: Optional[str] = None, stage: Optional[str] = None):
        self.network = network
        self.stage = stage
        super().__init__(message)
