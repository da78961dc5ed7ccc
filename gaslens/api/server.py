# gaslens/api/server.py - GasLensAPIServer class

import logging
from typing import Callable, Optional

import aiohttp
from aiohttp import web

from gaslens.api.rest_routes import setup_rest_routes
from gaslens.config.config_manager import ConfigManager, NetworkPreset
from gaslens.interfaces.blockchain import ChainDataSource, JsonRpcChainSource

logger = logging.getLogger("gaslens.api")

SourceFactory = Callable[[NetworkPreset, Optional[aiohttp.ClientSession]], ChainDataSource]


def json_rpc_source_factory(timeout: int) -> SourceFactory:
    def factory(preset: NetworkPreset, session: Optional[aiohttp.ClientSession]) -> ChainDataSource:
        return JsonRpcChainSource(preset.rpc_url, timeout=timeout, session=session, network=preset.name)
    return factory


def cors_middleware(origins):
    @web.middleware
    async def middleware(request, handler):
        request_origin = request.headers.get('Origin')
        if "*" in origins:
            origin = "*"
        elif request_origin in origins:
            origin = request_origin
        else:
            origin = None

        if request.method == 'OPTIONS':
            response = web.Response(status=204)
        else:
            response = await handler(request)

        if origin:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers['Access-Control-Allow-Methods'] = 'GET, OPTIONS'
            response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        return response

    return middleware


@web.middleware
async def error_middleware(request, handler):
    try:
        return await handler(request)
    except web.HTTPNotFound:
        return web.json_response({
            "error": "Not found",
            "message": "The requested endpoint does not exist",
            "path": request.path_qs
        }, status=404)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Unhandled error: {e}")
        return web.json_response({
            "error": "Internal server error",
            "message": "An unexpected error occurred"
        }, status=500)


class GasLensAPIServer:
    """HTTP server exposing gas price estimates per network"""

    def __init__(self, config_manager: ConfigManager,
                 source_factory: Optional[SourceFactory] = None,
                 host: Optional[str] = None, port: Optional[int] = None):
        self.config_manager = config_manager
        self.host = host or config_manager.get('api.host')
        self.port = port or config_manager.get('api.port')
        self.source_factory = source_factory or json_rpc_source_factory(
            config_manager.get('estimator.request_timeout')
        )
        self.session: Optional[aiohttp.ClientSession] = None
        self.runner = None
        self.site = None

        middlewares = [error_middleware]
        if config_manager.get('api.enable_cors'):
            middlewares.insert(0, cors_middleware(config_manager.get('api.cors_origins')))
        self.app = web.Application(middlewares=middlewares)
        self.app.on_startup.append(self._open_session)
        self.app.on_cleanup.append(self._close_session)

        setup_rest_routes(self.app, self)
        logger.debug("API routes setup completed")

    def create_source(self, preset: NetworkPreset) -> ChainDataSource:
        return self.source_factory(preset, self.session)

    async def _open_session(self, app):
        timeout = aiohttp.ClientTimeout(total=self.config_manager.get('estimator.request_timeout'))
        self.session = aiohttp.ClientSession(timeout=timeout)

    async def _close_session(self, app):
        if self.session is not None:
            await self.session.close()
            self.session = None

    async def start(self):
        """Start the API server"""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        logger.info(f"GasLens API server running on port {self.port}")
        logger.info(f"Available networks: {', '.join(self.config_manager.network_names())}")
        logger.info(f"API endpoint: http://{self.host}:{self.port}/api/gas/{{network}}")

    async def stop(self):
        """Stop the API server gracefully"""
        if self.site:
            await self.site.stop()
            logger.debug("API site stopped")

        if self.runner:
            await self.runner.cleanup()
            logger.debug("API runner cleaned up")

        logger.info("API server stopped")
