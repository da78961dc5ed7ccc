# gaslens/models/fee_models.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

BARE_TRANSFER_PAYLOAD = "0x"


@dataclass(frozen=True)
class ChainTransaction:
    """Transaction as returned by the chain data source"""
    gas_price: Optional[int]
    payload: str = BARE_TRANSFER_PAYLOAD
    tx_hash: Optional[str] = None

    @property
    def is_contract_call(self) -> bool:
        return self.payload != BARE_TRANSFER_PAYLOAD and len(self.payload) > 2


@dataclass(frozen=True)
class ChainBlock:
    """Block with its full transaction objects"""
    number: int
    timestamp: int
    transactions: Tuple[ChainTransaction, ...] = ()


@dataclass(frozen=True)
class PriceSample:
    price: int
    block_age: int
    is_contract_call: bool
    block_timestamp: int


@dataclass(frozen=True)
class ClassifiedSampleSet:
    """Sample prices split by transaction type, each sorted ascending"""
    simple_transfers: Tuple[int, ...] = ()
    contract_calls: Tuple[int, ...] = ()

    @classmethod
    def from_samples(cls, samples: List[PriceSample]) -> 'ClassifiedSampleSet':
        simple = sorted(s.price for s in samples if not s.is_contract_call)
        contract = sorted(s.price for s in samples if s.is_contract_call)
        return cls(simple_transfers=tuple(simple), contract_calls=tuple(contract))

    def combined(self) -> Tuple[int, ...]:
        """All prices regardless of type, sorted ascending"""
        return tuple(sorted(self.simple_transfers + self.contract_calls))

    def reference_prices(self) -> Tuple[int, ...]:
        """Contract calls when any exist, otherwise every sampled price"""
        if self.contract_calls:
            return self.contract_calls
        return self.combined()


@dataclass(frozen=True)
class CongestionBand:
    label: str
    safe_low_percentile: float
    standard_percentile: float
    fast_percentile: float


@dataclass(frozen=True)
class PriceEstimate:
    safe_low: int
    standard: int
    fast: int

    def __post_init__(self):
        if self.safe_low < 0 or self.standard < 0 or self.fast < 0:
            raise ValueError("Gas price tiers must be non-negative")
        if not self.safe_low <= self.standard <= self.fast:
            raise ValueError(
                f"Gas price tiers out of order: {self.safe_low}/{self.standard}/{self.fast}"
            )

    def to_dict(self) -> Dict[str, str]:
        """Serialize using the wire field names; values are decimal strings"""
        return {
            'safeLow': str(self.safe_low),
            'standard': str(self.standard),
            'fast': str(self.fast)
        }


@dataclass
class EstimationReport:
    """Diagnostics gathered during one estimation pass"""
    network: Optional[str] = None
    block_numbers: List[int] = field(default_factory=list)
    sample_count: int = 0
    simple_count: int = 0
    contract_count: int = 0
    congestion_ratio: Optional[float] = None
    band: Optional[str] = None
    used_fallback: bool = False
