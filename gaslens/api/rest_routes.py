# gaslens/api/rest_routes.py - REST API route handlers

import logging
from datetime import datetime, timezone

from aiohttp import web

from gaslens import __version__
from gaslens.core.exceptions import GasLensError, UnknownNetworkError
from gaslens.fees.fee_estimator import FeeEstimator

logger = logging.getLogger("gaslens.api")

SERVICE_NAME = "Rootstock GasLens API"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def setup_rest_routes(app: web.Application, server):
    """Setup REST API routes"""

    if app is None:
        raise ValueError("Application instance cannot be None")

    config_manager = server.config_manager

    async def get_gas_prices(request):
        """Get gas price estimations for a network"""
        network = request.match_info['network']

        try:
            preset = config_manager.get_network_preset(network)
        except UnknownNetworkError:
            names = config_manager.network_names()
            return web.json_response({
                "error": "Invalid network parameter",
                "message": f"Network must be one of: {', '.join(names)}",
                "received": network
            }, status=400)

        try:
            source = server.create_source(preset)
            estimator = FeeEstimator(config_manager.get('estimator.blocks_to_analyze'), network=network)
            estimate = await estimator.estimate(source)
        except GasLensError as e:
            logger.error(f"Error processing request for network {network}: {e}")
            return web.json_response({
                "error": "Internal server error",
                "message": "Failed to fetch gas price data",
                "details": str(e)
            }, status=500)

        return web.json_response({"timestamp": utc_timestamp(), **estimate.to_dict()})

    async def health(request):
        return web.json_response({
            "status": "healthy",
            "timestamp": utc_timestamp(),
            "service": SERVICE_NAME
        })

    async def index(request):
        return web.json_response({
            "name": SERVICE_NAME,
            "version": __version__,
            "description": "Gas price oracle for Rootstock (RSK) Mainnet and Testnet",
            "endpoints": {
                "GET /api/gas/{network}": "Get gas price estimations (" + " or ".join(config_manager.network_names()) + ")",
                "GET /health": "Health check endpoint"
            },
            "networks": config_manager.network_names()
        })

    app.router.add_get('/api/gas/{network}', get_gas_prices)
    app.router.add_get('/health', health)
    app.router.add_get('/', index)
