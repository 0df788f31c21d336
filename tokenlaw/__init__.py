"""Allocation policy validation and inflation-adaptive treasury rebalancing."""

from .core import (
    AllocationPolicy,
    AllocationSummary,
    InflationConfig,
    InflationState,
    InflationStatus,
    TokenLawError,
    ValidationError,
    ValidationErrorCode,
)
from .engine import InflationRebalancer
from .factory import TokenFactory, TokenRecord
from .policy import AllocationPolicyValidator, validate_policy
from .registry import SymbolRegistry

__all__ = [
    "AllocationPolicy",
    "AllocationSummary",
    "InflationConfig",
    "InflationState",
    "InflationStatus",
    "TokenLawError",
    "ValidationError",
    "ValidationErrorCode",
    "InflationRebalancer",
    "TokenFactory",
    "TokenRecord",
    "AllocationPolicyValidator",
    "validate_policy",
    "SymbolRegistry",
]
