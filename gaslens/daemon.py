#!/usr/bin/env python3
"""
GasLens daemon

Serves gas price estimates for the configured networks over HTTP, or runs
a single estimation pass with --once.
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import Optional, Sequence

from gaslens.api.rest_routes import utc_timestamp
from gaslens.api.server import GasLensAPIServer
from gaslens.config.config_manager import ConfigManager
from gaslens.core.exceptions import GasLensError
from gaslens.fees.fee_estimator import FeeEstimator
from gaslens.interfaces.blockchain import JsonRpcChainSource
from gaslens.utils.helpers import format_gwei
from gaslens.utils.logging import configure_logging

logger = logging.getLogger("gaslens.daemon")


def parse_arguments(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        description='GasLens - gas price oracle for Rootstock networks',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--config', '-c', help='Path to configuration file (YAML, JSON or TOML)')
    parser.add_argument('--host', help='API server host')
    parser.add_argument('--port', '-p', type=int, help='API server port')
    parser.add_argument('--blocks', type=int, help='Number of recent blocks to analyze')

    parser.add_argument('--once', metavar='NETWORK',
                        help='Run a single estimation for NETWORK, print it and exit')
    parser.add_argument('--gwei', action='store_true',
                        help='With --once, also print each tier in Gwei')

    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Log level')
    parser.add_argument('--log-file', help='Log file path')
    parser.add_argument('--json-logs', action='store_true', help='Emit logs as JSON lines')

    args = parser.parse_args(argv)
    if args.blocks is not None and args.blocks < 1:
        parser.error("--blocks must be at least 1")
    return args


def apply_overrides(config_manager: ConfigManager, args) -> ConfigManager:
    config = config_manager.config
    if args.host:
        config.api.host = args.host
    if args.port:
        config.api.port = args.port
    if args.blocks is not None:
        config.estimator.blocks_to_analyze = args.blocks
    if args.log_level:
        config.logging.level = args.log_level
    if args.log_file:
        config.logging.file = args.log_file
    if args.json_logs:
        config.logging.json_format = True
    return config_manager


async def run_once(config_manager: ConfigManager, network: str, show_gwei: bool = False) -> int:
    try:
        preset = config_manager.get_network_preset(network)
        async with JsonRpcChainSource(preset.rpc_url,
                                      timeout=config_manager.get('estimator.request_timeout'),
                                      network=network) as source:
            estimator = FeeEstimator(config_manager.get('estimator.blocks_to_analyze'), network=network)
            estimate = await estimator.estimate(source)
    except GasLensError as e:
        logger.error(f"Estimation for {network} failed: {e}")
        return 1

    print(json.dumps({"timestamp": utc_timestamp(), **estimate.to_dict()}, indent=2))
    if show_gwei:
        print(f"Safe Low: {format_gwei(estimate.safe_low)}")
        print(f"Standard: {format_gwei(estimate.standard)}")
        print(f"Fast:     {format_gwei(estimate.fast)}")
    return 0


async def serve(config_manager: ConfigManager) -> int:
    server = GasLensAPIServer(config_manager)
    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    await server.start()
    try:
        await shutdown_event.wait()
        logger.info("Shutdown signal received, shutting down gracefully")
    finally:
        await server.stop()
    return 0


async def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    config_manager = apply_overrides(ConfigManager(args.config), args)

    log_config = config_manager.config.logging
    configure_logging(
        level=log_config.level,
        log_file=log_config.file,
        component='gaslens',
        json_format=log_config.json_format,
        max_bytes=log_config.max_size,
        backup_count=log_config.backup_count,
        enable_console=log_config.console_enabled
    )

    if args.once:
        return await run_once(config_manager, args.once, show_gwei=args.gwei)
    return await serve(config_manager)


def run():
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
