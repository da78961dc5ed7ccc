# gaslens/fees/fee_estimator.py
import asyncio
import logging
from typing import List, Optional, Sequence

import aiohttp

from gaslens.core.exceptions import EstimationError, GasLensError
from gaslens.fees.fee_strategies import BaseFeeFallbackStrategy, CongestionAwareStrategy
from gaslens.interfaces.blockchain import ChainDataSource
from gaslens.models.fee_models import (
    ChainBlock,
    ClassifiedSampleSet,
    EstimationReport,
    PriceEstimate,
    PriceSample,
)

logger = logging.getLogger("gaslens.fees.estimator")

DEFAULT_BLOCKS_TO_ANALYZE = 20

# Failures wrapped into EstimationError; other exceptions propagate as-is
ESTIMATION_ERRORS = (GasLensError, ValueError, aiohttp.ClientError, asyncio.TimeoutError)


def extract_samples(blocks: Sequence[Optional[ChainBlock]]) -> List[PriceSample]:
    """Turn a newest-first block window into price samples, skipping unpriced transactions"""
    samples = []
    for block_age, block in enumerate(blocks):
        if block is None:
            continue
        for tx in block.transactions:
            if tx.gas_price is None or tx.gas_price <= 0:
                continue
            samples.append(PriceSample(
                price=tx.gas_price,
                block_age=block_age,
                is_contract_call=tx.is_contract_call,
                block_timestamp=block.timestamp
            ))
    return samples


class FeeEstimator:
    """Gas price estimation from a window of recent blocks"""

    def __init__(self, blocks_to_analyze: int = DEFAULT_BLOCKS_TO_ANALYZE, network: Optional[str] = None):
        if blocks_to_analyze < 1:
            raise ValueError(f"blocks_to_analyze must be at least 1, got {blocks_to_analyze}")
        self.blocks_to_analyze = blocks_to_analyze
        self.network = network
        self.strategy = CongestionAwareStrategy()
        self.fallback_strategy = BaseFeeFallbackStrategy()
        self.last_report = EstimationReport(network=network)

    async def estimate(self, source: ChainDataSource) -> PriceEstimate:
        """Run one estimation pass against the source"""
        report = EstimationReport(network=self.network)
        self.last_report = report

        try:
            latest_block_number = await source.get_block_number()
        except ESTIMATION_ERRORS as e:
            raise self._wrap(e, "block_number", "Failed to calculate gas prices") from e

        report.block_numbers = self._window(latest_block_number)

        try:
            blocks = await self._fetch_blocks(source, report.block_numbers)
        except ESTIMATION_ERRORS as e:
            raise self._wrap(e, "block_window", "Failed to calculate gas prices") from e

        samples = extract_samples(blocks)
        if not samples:
            logger.info("No valid transactions found, using fallback calculation")
            return await self._estimate_fallback(source, report)

        classified = ClassifiedSampleSet.from_samples(samples)
        report.sample_count = len(samples)
        report.simple_count = len(classified.simple_transfers)
        report.contract_count = len(classified.contract_calls)

        logger.info(f"Found {report.sample_count} total transactions")
        logger.info(f"Simple transfers: {report.simple_count}, Contract calls: {report.contract_count}")

        reference_prices = classified.reference_prices()
        estimate, band, ratio = self.strategy.estimate(reference_prices)
        report.band = band.label
        report.congestion_ratio = float(ratio)

        logger.info(f"Congestion level: {float(ratio) * 100:.1f}%")
        logger.info(f"Price range: {reference_prices[0]} to {reference_prices[-1]}")
        logger.info(f"Calculated: SafeLow={estimate.safe_low}, Standard={estimate.standard}, Fast={estimate.fast}",
                    extra={'structured_data': {'network': self.network, **estimate.to_dict()}})
        return estimate

    def _window(self, latest_block_number: int) -> List[int]:
        """Block numbers newest first, never below genesis"""
        oldest = max(0, latest_block_number - self.blocks_to_analyze + 1)
        return list(range(latest_block_number, oldest - 1, -1))

    async def _fetch_blocks(self, source: ChainDataSource, block_numbers: List[int]) -> List[Optional[ChainBlock]]:
        tasks = [asyncio.ensure_future(source.get_block_with_transactions(number)) for number in block_numbers]
        try:
            blocks = await asyncio.gather(*tasks)
        except BaseException:
            # One failure fails the window; drop the fetches still in flight
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for number, block in zip(block_numbers, blocks):
            if block is None:
                logger.warning(f"Block {number} not found, skipping")
        return blocks

    async def _estimate_fallback(self, source: ChainDataSource, report: EstimationReport) -> PriceEstimate:
        report.used_fallback = True
        try:
            base_price = await source.get_gas_price()
            estimate = self.fallback_strategy.estimate(base_price)
        except ESTIMATION_ERRORS as e:
            raise self._wrap(e, "fallback", "Fallback calculation failed") from e

        logger.info(f"Fallback calculation - Base gas price: {base_price}")
        logger.info(f"Fallback calculated: SafeLow={estimate.safe_low}, Standard={estimate.standard}, Fast={estimate.fast}")
        return estimate

    def _wrap(self, error: Exception, stage: str, summary: str) -> EstimationError:
        logger.error(f"Error calculating gas prices for {self.network or 'unknown network'} "
                     f"during {stage}: {error}")
        return EstimationError(f"{summary}: {error}", network=self.network, stage=stage)


async def estimate_gas_prices(source: ChainDataSource,
                              window_size: int = DEFAULT_BLOCKS_TO_ANALYZE,
                              network: Optional[str] = None) -> PriceEstimate:
    """Estimate safeLow/standard/fast gas prices from the latest `window_size` blocks"""
    return await FeeEstimator(window_size, network=network).estimate(source)
