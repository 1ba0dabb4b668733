"""
Data collaborators: identifier indices and token parsers.
"""

from fastrec.data.index import SimpleIndex
from fastrec.data.parsers import (
    DEFAULT_WEIGHT,
    identity,
    parse_int,
    parse_str,
    parse_weight,
    weight_parser,
)

__all__ = [
    "SimpleIndex",
    "DEFAULT_WEIGHT",
    "identity",
    "parse_int",
    "parse_str",
    "parse_weight",
    "weight_parser",
]
