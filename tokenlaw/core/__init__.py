"""Core module - models, errors and constants."""

from .models import (
    AllocationPolicy,
    AllocationSummary,
    InflationConfig,
    InflationState,
    InflationStatus,
    IndexSample,
)
from .constants import BPS_DENOMINATOR, DEFAULT_REBALANCE_STEP_BPS, U128_MAX
from .errors import (
    TokenLawError,
    ValidationError,
    ValidationErrorCode,
    PolicyFormatError,
    ConfigError,
    AuthorizationError,
    StateError,
    NotInitializedError,
    CooldownActiveError,
    ArithmeticOverflow,
    InputRangeError,
    SymbolUsedError,
)

__all__ = [
    "AllocationPolicy",
    "AllocationSummary",
    "InflationConfig",
    "InflationState",
    "InflationStatus",
    "IndexSample",
    "BPS_DENOMINATOR",
    "DEFAULT_REBALANCE_STEP_BPS",
    "U128_MAX",
    "TokenLawError",
    "ValidationError",
    "ValidationErrorCode",
    "PolicyFormatError",
    "ConfigError",
    "AuthorizationError",
    "StateError",
    "NotInitializedError",
    "CooldownActiveError",
    "ArithmeticOverflow",
    "InputRangeError",
    "SymbolUsedError",
]
