from gaslens.api.server import GasLensAPIServer, json_rpc_source_factory
from gaslens.api.rest_routes import setup_rest_routes

__all__ = [
    'GasLensAPIServer',
    'json_rpc_source_factory',
    'setup_rest_routes'
]
