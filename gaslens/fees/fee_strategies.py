# gaslens/fees/fee_strategies.py
import logging
from decimal import Decimal
from fractions import Fraction
from typing import Sequence, Tuple

from gaslens.models.fee_models import CongestionBand, PriceEstimate

logger = logging.getLogger("gaslens.fees.strategies")

HIGH_CONGESTION = CongestionBand("high", 0.10, 0.40, 0.70)
MEDIUM_CONGESTION = CongestionBand("medium", 0.15, 0.45, 0.75)
LOW_CONGESTION = CongestionBand("low", 0.20, 0.50, 0.80)

# Lower bounds are exclusive: a ratio equal to a threshold falls in the calmer band
HIGH_CONGESTION_THRESHOLD = Fraction(1, 2)
MEDIUM_CONGESTION_THRESHOLD = Fraction(1, 5)

FALLBACK_SAFE_LOW_MULTIPLIER = Fraction(7, 10)
FALLBACK_FAST_MULTIPLIER = Fraction(3, 2)


def calculate_congestion_ratio(prices: Sequence[int]) -> Fraction:
    """(max - min) / min over an ascending price sequence; 0 for a single price"""
    if not prices:
        raise ValueError("Cannot measure congestion of an empty price sequence")
    if len(prices) == 1:
        return Fraction(0)

    min_price = prices[0]
    max_price = prices[-1]
    if min_price <= 0:
        raise ValueError(f"Reference prices must be positive, got {min_price}")
    return Fraction(max_price - min_price, min_price)


def select_congestion_band(ratio: Fraction) -> CongestionBand:
    if ratio > HIGH_CONGESTION_THRESHOLD:
        return HIGH_CONGESTION
    elif ratio > MEDIUM_CONGESTION_THRESHOLD:
        return MEDIUM_CONGESTION
    return LOW_CONGESTION


def _scaled_floor(count: int, percentile: float) -> int:
    # Decimal keeps e.g. 20 * 0.15 at exactly 3
    return int(Decimal(count) * Decimal(str(percentile)))


def derive_tier_indices(count: int, band: CongestionBand) -> Tuple[int, int, int]:
    """Map a band's percentiles to (safe_low, standard, fast) indices into a list of `count`"""
    if count < 1:
        raise ValueError("Cannot derive tier indices for an empty price sequence")

    last = count - 1
    safe_low_index = max(0, _scaled_floor(count, band.safe_low_percentile) - 1)
    standard_index = _scaled_floor(count, band.standard_percentile)
    fast_index = min(last, _scaled_floor(count, band.fast_percentile))

    return (
        min(max(safe_low_index, 0), last),
        min(max(standard_index, 0), last),
        min(max(fast_index, 0), last)
    )


class CongestionAwareStrategy:
    """Pick percentile tiers from the sorted reference prices, widening them as congestion rises"""

    def estimate(self, reference_prices: Sequence[int]) -> Tuple[PriceEstimate, CongestionBand, Fraction]:
        ratio = calculate_congestion_ratio(reference_prices)
        band = select_congestion_band(ratio)

        safe_low_index, standard_index, fast_index = derive_tier_indices(len(reference_prices), band)

        logger.info(f"{band.label.capitalize()} congestion detected, using "
                    f"{band.safe_low_percentile:.2f}/{band.standard_percentile:.2f}/"
                    f"{band.fast_percentile:.2f} percentiles")

        estimate = PriceEstimate(
            safe_low=reference_prices[safe_low_index],
            standard=reference_prices[standard_index],
            fast=reference_prices[fast_index]
        )
        return estimate, band, ratio


class BaseFeeFallbackStrategy:
    """Derive tiers from the node's base gas price when no priced transactions were sampled"""

    def estimate(self, base_price: int) -> PriceEstimate:
        if base_price < 0:
            raise ValueError(f"Base gas price must be non-negative, got {base_price}")

        return PriceEstimate(
            safe_low=int(base_price * FALLBACK_SAFE_LOW_MULTIPLIER),
            standard=base_price,
            fast=int(base_price * FALLBACK_FAST_MULTIPLIER)
        )
