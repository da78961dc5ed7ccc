"""
Tests for the command line entry point.
"""

import json

import pytest
from aiohttp import test_utils

from gaslens.config.config_manager import ConfigManager, NetworkPreset
from gaslens.daemon import apply_overrides, parse_arguments, run_once

from conftest import TRANSFER_SELECTOR, make_rpc_app, rpc_block, rpc_tx


def test_parse_arguments_defaults():
    args = parse_arguments([])
    assert args.once is None
    assert args.port is None
    assert args.gwei is False


def test_overrides_applied():
    args = parse_arguments(['--port', '9000', '--blocks', '5', '--log-level', 'DEBUG', '--json-logs'])
    manager = apply_overrides(ConfigManager(environ={}), args)

    assert manager.get('api.port') == 9000
    assert manager.get('estimator.blocks_to_analyze') == 5
    assert manager.get('logging.level') == 'DEBUG'
    assert manager.get('logging.json_format') is True


def test_invalid_block_count_rejected():
    with pytest.raises(SystemExit):
        parse_arguments(['--blocks', '0'])


@pytest.mark.asyncio
async def test_run_once_unknown_network(capsys):
    exit_code = await run_once(ConfigManager(environ={}), 'devnet')
    assert exit_code == 1
    assert capsys.readouterr().out == ""


@pytest.mark.asyncio
async def test_run_once_prints_estimate(capsys):
    height = 0x40
    app = make_rpc_app({
        "eth_blockNumber": {"result": hex(height)},
        "eth_getBlockByNumber": lambda params: {"result": rpc_block(int(params[0], 16), [
            rpc_tx(59240000, TRANSFER_SELECTOR),
            rpc_tx(65164000, TRANSFER_SELECTOR),
            rpc_tx(70000000, TRANSFER_SELECTOR),
        ])},
    })

    async with test_utils.TestServer(app) as server:
        manager = ConfigManager(environ={})
        manager.config.estimator.blocks_to_analyze = 1
        manager.config.networks['testnet'] = NetworkPreset(
            name='testnet', rpc_url=str(server.make_url("/")), chain_id=31
        )
        exit_code = await run_once(manager, 'testnet', show_gwei=True)

    assert exit_code == 0
    assert [params for _, params in app["calls"]] == [[], [hex(height), True]]

    out = capsys.readouterr().out
    json_text, gwei_text = out.split("}\n", 1)
    payload = json.loads(json_text + "}")
    assert set(payload) == {'timestamp', 'safeLow', 'standard', 'fast'}
    assert payload['timestamp'].endswith('Z')
    assert (payload['safeLow'], payload['standard'], payload['fast']) == ('59240000', '65164000', '70000000')
    assert gwei_text.splitlines() == [
        "Safe Low: 0.06 Gwei",
        "Standard: 0.07 Gwei",
        "Fast:     0.07 Gwei",
    ]


@pytest.mark.asyncio
async def test_run_once_source_failure(capsys):
    app = make_rpc_app({}, status=503)

    async with test_utils.TestServer(app) as server:
        manager = ConfigManager(environ={})
        manager.config.networks['mainnet'] = NetworkPreset(
            name='mainnet', rpc_url=str(server.make_url("/")), chain_id=30
        )
        exit_code = await run_once(manager, 'mainnet', show_gwei=True)

    assert exit_code == 1
    assert capsys.readouterr().out == ""
