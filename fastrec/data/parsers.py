"""
Token parsers for preference records.

A parser maps one raw token to a typed value and raises ``ValueError`` (or
``TypeError``) on bad input. ``None`` stands for an absent field, which only
the weight parser is expected to accept.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional

DEFAULT_WEIGHT = 1.0


def parse_str(token: Optional[Any]) -> str:
    if token is None:
        raise ValueError("missing token")
    return str(token).strip()


def parse_int(token: Optional[Any]) -> int:
    if token is None:
        raise ValueError("missing token")
    return int(token)


def identity(token: Optional[Any]) -> Any:
    """Pass already-typed identifiers through unchanged."""
    if token is None:
        raise ValueError("missing token")
    return token


def weight_parser(default: float = DEFAULT_WEIGHT) -> Callable[[Optional[Any]], float]:
    """
    Build a weight parser returning ``default`` for an absent token.

    NaN is rejected; infinities and negative values are accepted since
    weights have no required range.
    """
    def parse(token: Optional[Any]) -> float:
        if token is None:
            return default
        if isinstance(token, str) and token.strip() == "":
            return default
        value = float(token)
        if math.isnan(value):
            raise ValueError("NaN weight")
        return value

    return parse


parse_weight = weight_parser()


__all__ = [
    "DEFAULT_WEIGHT",
    "parse_str",
    "parse_int",
    "identity",
    "weight_parser",
    "parse_weight",
]
