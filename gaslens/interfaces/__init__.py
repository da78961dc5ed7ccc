from .blockchain import ChainDataSource, JsonRpcChainSource

__all__ = [
    'ChainDataSource',
    'JsonRpcChainSource'
]
