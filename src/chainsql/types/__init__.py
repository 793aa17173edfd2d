"""Type definitions for chainsql.

This module provides the base model used by every statement tree node
together with the raw SQL fragment types.
"""

from .base import ChainBaseModel
from .values import RawExpression, RawFragment

__all__ = [
    'ChainBaseModel',
    'RawExpression',
    'RawFragment',
]
