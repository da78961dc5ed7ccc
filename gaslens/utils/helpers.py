# gaslens/utils/helpers.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from gaslens.core.exceptions import MalformedDataError

WEI_PER_GWEI = 10 ** 9


def decode_quantity(value: Any, field_name: str = "quantity") -> int:
    """Decode a 0x-prefixed hex quantity into an int"""
    if isinstance(value, bool):
        raise MalformedDataError(f"Invalid {field_name}: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise MalformedDataError(f"Negative {field_name}: {value}")
        return value
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise MalformedDataError(f"Invalid {field_name}: {value!r}")
    try:
        return int(value, 16)
    except ValueError:
        raise MalformedDataError(f"Invalid {field_name}: {value!r}") from None


def decode_optional_quantity(value: Any, field_name: str = "quantity") -> Optional[int]:
    if value is None:
        return None
    return decode_quantity(value, field_name)


def encode_quantity(value: int) -> str:
    return hex(value)


def format_gwei(wei: int) -> str:
    """Render a wei amount as gwei with two decimals, e.g. '0.07 Gwei'"""
    gwei = (Decimal(wei) / WEI_PER_GWEI).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{gwei} Gwei"
