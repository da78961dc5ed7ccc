from gaslens.utils.helpers import decode_quantity, encode_quantity, format_gwei
from gaslens.utils.logging import configure_logging, StructuredFormatter

__all__ = [
    'decode_quantity',
    'encode_quantity',
    'format_gwei',
    'configure_logging',
    'StructuredFormatter'
]
